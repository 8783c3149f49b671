"""
Data Loader - reads the reference face library from disk.

Expected layout:
    database_dir/
        <identity_a>/  img1.png  img2.jpg ...
        <identity_b>/  ...

Each immediate sub-directory is one identity (its name is the label); every
.png / .jpg / .jpeg file inside (case-insensitive) is a sample of it.
Directories and files are visited in sorted order so that the same library
always yields the same training set.
"""

import os
import sys
from dataclasses import dataclass, field

from tqdm import tqdm

from fisherfaces.config import IMAGE_WIDTH, IMAGE_HEIGHT, IMAGE_EXTENSIONS
from fisherfaces.preprocessing import load_face_vector


@dataclass
class TrainingData:
    """N sample vectors paired index-by-index with N labels."""

    vectors: list = field(default_factory=list)
    labels: list = field(default_factory=list)

    def size(self):
        return len(self.vectors)

    def is_empty(self):
        return not self.vectors


def is_image_file(path):
    return os.path.isfile(path) and path.lower().endswith(IMAGE_EXTENSIONS)


def list_image_files(directory):
    """Image files directly inside directory, sorted by name."""
    return [
        os.path.join(directory, name)
        for name in sorted(os.listdir(directory))
        if is_image_file(os.path.join(directory, name))
    ]


def warn_skipped(path, error):
    print(f"  [Warning] Failed to process image {os.path.basename(path)}: {error}",
          file=sys.stderr, flush=True)


def load_database(directory, width=IMAGE_WIDTH, height=IMAGE_HEIGHT, verbose=True):
    """
    Load every identity under directory.

    Args:
        directory: Library root
        width, height: Preprocessing resize target
        verbose: Print identities and show a progress bar

    Returns:
        TrainingData (possibly empty)

    Raises:
        NotADirectoryError: directory does not exist or is not a directory
    """
    if not os.path.isdir(directory):
        raise NotADirectoryError(f"Database directory not found: {directory}")

    label_dirs = [
        name for name in sorted(os.listdir(directory))
        if os.path.isdir(os.path.join(directory, name))
    ]

    data = TrainingData()
    iterator = label_dirs
    if verbose:
        iterator = tqdm(label_dirs, desc="  Loading identities")

    for label in iterator:
        label_dir = os.path.join(directory, label)
        if verbose:
            tqdm.write(f"  Registering identity: {label}")
        for path in list_image_files(label_dir):
            try:
                vector = load_face_vector(path, width, height)
            except (OSError, ValueError) as e:
                warn_skipped(path, e)
                continue
            data.vectors.append(vector)
            data.labels.append(label)

    return data
