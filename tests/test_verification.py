# tests/test_verification.py
from fisherfaces.data_loader import load_database
from fisherfaces.models import FisherfacesModel
from fisherfaces.recognizer import FaceRecognizer, RecognitionResult
from fisherfaces.verification import summarize_results, verify_suspects


def _recognizer(image_database, threshold=12.0e6):
    data = load_database(str(image_database), width=10, height=10, verbose=False)
    model = FisherfacesModel().train(data.vectors, data.labels)
    return FaceRecognizer(model, threshold=threshold)


def test_verifies_each_probe(image_database, suspects_dir, capsys):
    recognizer = _recognizer(image_database)
    results = verify_suspects(str(suspects_dir), recognizer, width=10, height=10)

    assert [r.source_name for r in results] == ["1_alice.png", "2_bob.png"]
    assert [r.label for r in results] == ["alice", "bob"]
    assert all(r.is_match for r in results)
    assert "3_broken.jpeg" in capsys.readouterr().err


def test_zero_threshold_gives_unknowns(image_database, suspects_dir):
    recognizer = _recognizer(image_database, threshold=0.0)
    results = verify_suspects(str(suspects_dir), recognizer, width=10, height=10,
                              verbose=True)
    assert len(results) == 2
    assert all(r.label == "Unknown" for r in results)


def test_missing_suspects_directory(image_database, tmp_path, capsys):
    recognizer = _recognizer(image_database)
    assert verify_suspects(str(tmp_path / "absent"), recognizer) == []
    assert "not found" in capsys.readouterr().err


def test_summary_counts():
    results = [
        RecognitionResult("a", "alice", 1.0, True),
        RecognitionResult("b", "Unknown", 9.0, False),
        RecognitionResult("c", "bob", 2.0, True),
    ]
    assert summarize_results(results) == {"total": 3, "matches": 2, "unknown": 1}
    assert summarize_results([]) == {"total": 0, "matches": 0, "unknown": 0}
