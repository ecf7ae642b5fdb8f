#!/usr/bin/env python
"""
Integrate saved axion spectra over an energy window.

Usage:
    python integrate_spectrum_file.py <spectrum_file> <erg_min> <erg_max> [--electron-lines]
    python integrate_spectrum_file.py <directory> <erg_min> <erg_max> --batch

Example:
    python integrate_spectrum_file.py ./output/primakoff.dat 1.0 10.0
    python integrate_spectrum_file.py ./output/ 0.5 8.0 --batch --electron-lines
"""

import argparse
import sys
import os

import pandas as pd

from solaxflux.spectral_flux import integrated_flux_from_file
from workflows import batch_integrate_flux_files


def main(argv=None):
    parser = argparse.ArgumentParser(
        description='Integrate saved axion spectra over an energy window'
    )
    parser.add_argument(
        'path',
        type=str,
        help='Spectrum table (energy, flux, ...) or directory of tables with --batch'
    )
    parser.add_argument('erg_min', type=float, help='Lower end of the energy window (keV)')
    parser.add_argument('erg_max', type=float, help='Upper end of the energy window (keV)')
    parser.add_argument(
        '--electron-lines',
        action='store_true',
        help='Split the window at the axion-electron line energies'
    )
    parser.add_argument(
        '--batch',
        action='store_true',
        help='Integrate every *.dat table in the directory'
    )

    args = parser.parse_args(argv)

    if not os.path.exists(args.path):
        print(f"Error: Path not found: {args.path}")
        sys.exit(1)

    try:
        if args.batch:
            results = batch_integrate_flux_files(
                args.path, args.erg_min, args.erg_max,
                includes_electron_interactions=args.electron_lines
            )
            if not results:
                print("No files were processed.")
                sys.exit(1)
            summary_file = os.path.join(args.path, 'integrated_flux_summary.csv')
            pd.DataFrame(results).to_csv(summary_file, index=False)
            print(f"Summary saved to: {summary_file}")
        else:
            flux = integrated_flux_from_file(args.erg_min, args.erg_max, args.path,
                                             args.electron_lines)
            print(f"Integrated flux in [{args.erg_min}, {args.erg_max}] keV: {flux:.6e} axions / cm^2 s")

    except Exception as e:
        print(f"\n{'='*70}")
        print(f"  ERROR!")
        print(f"{'='*70}")
        print(f"{type(e).__name__}: {e}")
        print(f"{'='*70}\n")
        sys.exit(1)


if __name__ == "__main__":
    main()
