#!/usr/bin/env python
"""
Draw axion (energy, radius) samples from saved inverse-CDF tables.

The tables are produced by solaxflux.sampling.calculate_inverse_cdfs_from_solar_model
(<prefix>_radii.dat and <prefix>_energies.dat).

Usage:
    python draw_mc_samples.py <mc_file_prefix> [--samples N] [--seed S] [--output FILE]

Example:
    python draw_mc_samples.py ./output/mc_primakoff --samples 100000 --output samples.dat
"""

import argparse
import sys

from solaxflux.constants import LIBRARY_NAME
from solaxflux.sampling import draw_mc_samples_from_file
from solaxflux.spectrum_utils import save_to_file


def main(argv=None):
    parser = argparse.ArgumentParser(
        description='Draw axion (energy, radius) samples from inverse-CDF tables'
    )
    parser.add_argument('mc_file_prefix', type=str, help='Prefix of the inverse-CDF tables')
    parser.add_argument(
        '--samples',
        type=int,
        default=10000,
        help='Number of samples to draw (default: 10000)'
    )
    parser.add_argument('--seed', type=int, default=None, help='Random seed')
    parser.add_argument(
        '--output',
        type=str,
        default=None,
        help='Output table (default: <mc_file_prefix>_samples.dat)'
    )

    args = parser.parse_args(argv)
    output = args.output or f"{args.mc_file_prefix}_samples.dat"

    print(f"\n{'='*70}")
    print(f"  AXION MONTE CARLO SAMPLING")
    print(f"{'='*70}")
    print(f"Input prefix: {args.mc_file_prefix}")
    print(f"Samples: {args.samples:,}")
    print(f"Output: {output}")
    print(f"{'='*70}\n")

    try:
        samples = draw_mc_samples_from_file(args.mc_file_prefix, args.samples, rng=args.seed)
        save_to_file(output, (samples[:, 0], samples[:, 1]),
                     f"Axion Monte Carlo samples by {LIBRARY_NAME}.\n"
                     "Columns: energy [keV], radius [R_sol]")
        print(f"Mean energy: {samples[:, 0].mean():.4f} keV, mean radius: {samples[:, 1].mean():.4f} R_sol")

    except Exception as e:
        print(f"\n{'='*70}")
        print(f"  ERROR!")
        print(f"{'='*70}")
        print(f"{type(e).__name__}: {e}")
        print(f"{'='*70}\n")
        sys.exit(1)


if __name__ == "__main__":
    main()
