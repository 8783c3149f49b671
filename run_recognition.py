"""
Fisherfaces face recognition - command line driver.

Trains a Fisherfaces model on a library of labelled face images and checks
every image of a probe directory against it.

Usage:
    python run_recognition.py [database_dir] [suspects_dir] [threshold]

Defaults: data/database_criminosos, data/suspeitos, 12.0e6.
Exit codes: 0 success (also when nothing matches), 1 I/O or training
failure, 2 bad arguments.
"""

import functools
import math
import os
import sys
import time

from fisherfaces import config
from fisherfaces.data_loader import load_database
from fisherfaces.errors import FisherfacesError
from fisherfaces.models import FisherfacesModel
from fisherfaces.recognizer import FaceRecognizer
from fisherfaces.verification import verify_suspects, summarize_results
from fisherfaces.visualization import (
    plot_mean_face, plot_fisherfaces, plot_gallery_projection
)

# Force unbuffered output
print = functools.partial(print, flush=True)

USAGE = "Usage: python run_recognition.py [database_dir] [suspects_dir] [threshold]"


def print_banner(database_dir, suspects_dir, threshold):
    print("=" * 60)
    print("  FACE RECOGNITION SYSTEM (FISHERFACES)")
    print("=" * 60)
    print("Configuration:")
    print(f"  - Training database: {database_dir}")
    print(f"  - Suspects folder:   {suspects_dir}")
    print(f"  - Distance threshold: {threshold}")


def parse_args(argv):
    """Positional [database_dir] [suspects_dir] [threshold] with defaults."""
    if len(argv) > 3:
        raise ValueError(f"Too many arguments ({len(argv)})")
    database_dir = argv[0] if len(argv) >= 1 else config.DEFAULT_DATABASE_DIR
    suspects_dir = argv[1] if len(argv) >= 2 else config.DEFAULT_SUSPECTS_DIR
    try:
        threshold = float(argv[2]) if len(argv) >= 3 else config.DEFAULT_THRESHOLD
    except ValueError:
        raise ValueError(f"Threshold must be a number, got {argv[2]!r}") from None
    if math.isnan(threshold):
        raise ValueError(f"Threshold must be a number, got {argv[2]!r}")
    return (os.path.join(os.getcwd(), database_dir),
            os.path.join(os.getcwd(), suspects_dir),
            threshold)


def save_debug_figures(model):
    plot_mean_face(model)
    plot_fisherfaces(model)
    plot_gallery_projection(model)


def main(argv=None, save_figures=None):
    if argv is None:
        argv = sys.argv[1:]
    if save_figures is None:
        save_figures = config.SAVE_FIGURES

    try:
        database_dir, suspects_dir, threshold = parse_args(argv)
    except ValueError as e:
        print(f"[ERROR] {e}", file=sys.stderr)
        print(USAGE, file=sys.stderr)
        return 2

    print_banner(database_dir, suspects_dir, threshold)

    # 1. Loading
    try:
        start = time.time()
        training_data = load_database(database_dir)
        elapsed_ms = (time.time() - start) * 1000
    except OSError as e:
        print(f"Critical I/O error: {e}", file=sys.stderr)
        return 1

    if training_data.is_empty():
        print("[ERROR] No images found. Check the database path.", file=sys.stderr)
        return 1
    print(f"Loading finished in {elapsed_ms:.0f} ms. Images: {training_data.size()}")

    # 2. Training
    print("Training model...")
    model = FisherfacesModel()
    try:
        model.train(training_data.vectors, training_data.labels)
    except FisherfacesError as e:
        print(f"[ERROR] Training failed: {e}", file=sys.stderr)
        return 1
    print(f"Training OK. Fisherfaces: {model.n_components}")

    if save_figures:
        save_debug_figures(model)

    # 3. Recognition
    recognizer = FaceRecognizer(model, threshold=threshold)
    print("\n--- Verification results ---")
    results = verify_suspects(suspects_dir, recognizer)

    if not results:
        print("No files processed in the suspects folder.")
    for result in results:
        print(result)

    summary = summarize_results(results)
    print(f"\nProbes: {summary['total']}, matches: {summary['matches']}, "
          f"unknown: {summary['unknown']}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
