"""
Verification - run every probe image in a directory through a recognizer.
"""

import os
import sys

from tqdm import tqdm

from fisherfaces.config import IMAGE_WIDTH, IMAGE_HEIGHT
from fisherfaces.data_loader import list_image_files, warn_skipped
from fisherfaces.preprocessing import load_face_vector


def verify_suspects(directory, recognizer, width=IMAGE_WIDTH, height=IMAGE_HEIGHT,
                    verbose=False):
    """
    Recognize each image file in directory (sorted by name).

    Files that fail to decode are reported on stderr and skipped. A missing
    directory is reported and yields no results.

    Returns:
        list of RecognitionResult
    """
    if not os.path.isdir(directory):
        print(f"Suspects directory not found: {directory}", file=sys.stderr, flush=True)
        return []

    paths = list_image_files(directory)
    iterator = paths
    if verbose:
        iterator = tqdm(paths, desc="  Verifying suspects")

    results = []
    for path in iterator:
        try:
            vector = load_face_vector(path, width, height)
        except (OSError, ValueError) as e:
            warn_skipped(path, e)
            continue
        results.append(recognizer.recognize(vector, os.path.basename(path)))
    return results


def summarize_results(results):
    """Counts of probes, matches and unknowns."""
    matches = sum(1 for r in results if r.is_match)
    return {"total": len(results), "matches": matches, "unknown": len(results) - matches}
