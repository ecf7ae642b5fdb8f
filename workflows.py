"""
Batch workflows for solar axion flux tables.

This module provides high-level workflow functions for:
- Computing disc-restricted spectra for a list of disc radii
- Listing and discovering saved spectrum tables in a directory
- Batch integration of saved spectra over an energy window

Key Functions
-------------
- save_spectral_flux_for_different_radii: One spectrum table per disc radius
- list_spectrum_files: Find all spectrum tables in a directory
- batch_integrate_flux_files: Integrate every table over [erg_min, erg_max]
"""

import os
import glob
import re
import pandas as pd
from solaxflux.errors import SolaxfluxError
from solaxflux.spectral_flux import calculate_spectral_flux_solar_disc, integrated_flux_from_file
from solaxflux.tools import timer


@timer
def save_spectral_flux_for_different_radii(ergs, radii, model, output_file_root, process="Primakoff"):
    """Compute and save the disc spectrum for each disc radius.

    Parameters
    ----------
    ergs : array-like
        Energies (keV)
    radii : array-like
        Disc radii r_max (solar radii)
    model : solar model
    output_file_root : str
        Tables are saved as <root>_r<r_max>.dat
    process : Process or str
        Production process

    Returns
    -------
    pandas.DataFrame
        One row per radius: r_max, file, total flux (trapezoid rule over the energies)
    """
    os.makedirs(os.path.dirname(os.path.abspath(output_file_root)), exist_ok=True)

    print(f"\n{'='*70}")
    print(f"Spectral flux for {len(radii)} disc radii, {len(ergs)} energies, process {process}")
    print(f"{'='*70}")

    rows = []
    for i, r_max in enumerate(radii):
        fname = f"{output_file_root}_r{r_max:.4f}.dat"
        print(f"[{i+1}/{len(radii)}] r_max = {r_max:.4f} R_sol -> {fname}")
        table = calculate_spectral_flux_solar_disc(ergs, r_max, model, process, saveas=fname)
        rows.append({
            'r_max': r_max,
            'file': fname,
            'total_flux': table.total_flux(),
        })

    summary = pd.DataFrame(rows)
    summary_file = f"{output_file_root}_summary.csv"
    summary.to_csv(summary_file, index=False)
    print(f"\nSummary saved to: {summary_file}")
    return summary


def list_spectrum_files(directory='./output/', pattern='*.dat'):
    """List all spectrum tables in a directory.

    Parameters
    ----------
    directory : str
        Directory to search
    pattern : str
        Glob pattern of the table files

    Returns
    -------
    list of dict
        List of dictionaries with file info: {'path', 'filename', 'r_max'}
    """
    files = glob.glob(os.path.join(directory, pattern))

    results = []
    for fpath in sorted(files):
        basename = os.path.basename(fpath)

        # Disc tables carry their radius in the name
        r_match = re.search(r'_r([\d.]+)\.dat$', basename)

        info = {
            'path': fpath,
            'filename': basename,
            'r_max': float(r_match.group(1)) if r_match else None,
        }
        results.append(info)

    return results


def batch_integrate_flux_files(directory, erg_min, erg_max, includes_electron_interactions=False,
                               pattern='*.dat'):
    """Integrate every spectrum table in a directory over an energy window.

    Files that cannot be integrated (window outside the table, unreadable
    file, non-finite flux values) are reported in the summary instead of
    stopping the batch.

    Returns
    -------
    list of dict
        Results for each file processed
    """
    files = list_spectrum_files(directory, pattern)

    if not files:
        print(f"No spectrum files found in {directory}")
        return []

    print(f"\n{'='*70}")
    print(f"Found {len(files)} spectrum files, window [{erg_min}, {erg_max}] keV")
    print(f"{'='*70}\n")

    results = []
    for i, finfo in enumerate(files):
        print(f"[{i+1}/{len(files)}] Processing: {finfo['filename']}")

        try:
            flux = integrated_flux_from_file(erg_min, erg_max, finfo['path'],
                                             includes_electron_interactions)
            result = {
                'success': True,
                'file': finfo['filename'],
                'r_max': finfo['r_max'],
                'flux': flux,
            }
            print(f"✓ Integrated flux: {flux:.6e} axions / cm^2 s")

        except (SolaxfluxError, ValueError, OSError) as e:
            result = {
                'success': False,
                'file': finfo['filename'],
                'r_max': finfo['r_max'],
                'error': str(e),
            }
            print(f"✗ Failed: {e}")
        results.append(result)

    n_success = sum(1 for r in results if r['success'])
    print(f"\n{'='*70}")
    print("BATCH INTEGRATION SUMMARY")
    print(f"{'='*70}")
    print(f"Total files: {len(results)}")
    print(f"Successful: {n_success}")
    print(f"Failed: {len(results) - n_success}")
    print(f"{'='*70}\n")

    return results


__all__ = [
    'save_spectral_flux_for_different_radii',
    'list_spectrum_files',
    'batch_integrate_flux_files',
]
