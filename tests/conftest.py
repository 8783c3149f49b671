# tests/conftest.py
import numpy as np
import pytest
from PIL import Image

from fisherfaces.models import FisherfacesModel


@pytest.fixture
def toy_data():
    """Two identities, two samples each, D = 4."""
    vectors = [
        [10.0, 10.0, 10.0, 10.0],
        [12.0, 10.0, 10.0, 10.0],
        [10.0, 10.0, 10.0, 50.0],
        [10.0, 10.0, 10.0, 48.0],
    ]
    labels = ["A", "A", "B", "B"]
    return vectors, labels


@pytest.fixture
def toy_model(toy_data):
    vectors, labels = toy_data
    return FisherfacesModel().train(vectors, labels)


@pytest.fixture
def separated_data():
    """
    Three well separated identities, four noisy samples each, D = 50.
    Samples are interleaved (p0, p1, p2, p0, ...) so grouping has work to do.
    """
    rng = np.random.default_rng(7)
    centers = rng.uniform(0, 255, size=(3, 50))
    vectors, labels = [], []
    for _ in range(4):
        for c in range(3):
            vectors.append(centers[c] + rng.normal(0, 5, size=50))
            labels.append(f"person_{c}")
    return np.array(vectors), labels


@pytest.fixture
def separated_model(separated_data):
    vectors, labels = separated_data
    return FisherfacesModel().train(vectors, labels)


def _face_array(kind, rng, size=20):
    """Synthetic 'face': a gradient whose direction encodes the identity."""
    ramp = np.arange(size, dtype=np.float64) * (230.0 / size)
    if kind == "horizontal":
        gray = np.tile(ramp, (size, 1))
    else:
        gray = np.tile(ramp[:, None], (1, size))
    gray = np.clip(gray + rng.integers(0, 25, size=(size, size)), 0, 255)
    return np.stack([gray] * 3, axis=-1).astype(np.uint8)


def write_face(path, kind, rng):
    Image.fromarray(_face_array(kind, rng)).save(path)


@pytest.fixture
def image_database(tmp_path):
    """
    tmp/database/
        alice/  a0.png a1.png A2.JPG  broken.png  notes.txt
        bob/    b0.png b1.jpg b2.png
    """
    rng = np.random.default_rng(3)
    root = tmp_path / "database"
    alice = root / "alice"
    bob = root / "bob"
    alice.mkdir(parents=True)
    bob.mkdir()

    write_face(alice / "a0.png", "horizontal", rng)
    write_face(alice / "a1.png", "horizontal", rng)
    write_face(alice / "A2.JPG", "horizontal", rng)
    (alice / "broken.png").write_bytes(b"not an image at all")
    (alice / "notes.txt").write_text("ignored")

    write_face(bob / "b0.png", "vertical", rng)
    write_face(bob / "b1.jpg", "vertical", rng)
    write_face(bob / "b2.png", "vertical", rng)
    return root


@pytest.fixture
def suspects_dir(tmp_path, image_database):
    """Probe folder: exact copies of one alice and one bob image, plus junk."""
    root = tmp_path / "suspects"
    root.mkdir()
    (root / "1_alice.png").write_bytes((image_database / "alice" / "a0.png").read_bytes())
    (root / "2_bob.png").write_bytes((image_database / "bob" / "b2.png").read_bytes())
    (root / "3_broken.jpeg").write_bytes(b"\x00\x01garbage")
    return root
