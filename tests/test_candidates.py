import pytest

from nerdle_solver.candidates import CandidateStore, filter_candidates, load_candidates
from nerdle_solver.errors import EmptySource, InconsistentLength, UndecodableSource
from nerdle_solver.mask import compute_mask

TOY = ["1+1=2", "2+1=3", "1+2=3"]

CLASSIC = [
    "1+2*3=7",
    "1+2*4=9",
    "2*3+1=7",
    "3*3-2=7",
    "9-2*1=7",
    "8-1*1=7",
    "4+5-2=7",
    "7*1+0=7",
]


def test_load_from_file_keeps_order(tmp_path):
    path = tmp_path / "toy.txt"
    path.write_text("1+1=2\n2+1=3\n\n1+2=3\n", encoding="utf-8")
    assert load_candidates(path) == TOY
    assert load_candidates(str(path)) == TOY


def test_load_unicode_powers(tmp_path):
    path = tmp_path / "powers.txt"
    path.write_text("3²+1=10\n2³+2=10\n", encoding="utf-8")
    assert load_candidates(path) == ["3²+1=10", "2³+2=10"]


def test_load_drops_duplicates():
    logged = []
    assert load_candidates(["1+1=2", "1+1=2", "2+1=3"], log_debug=logged.append) == ["1+1=2", "2+1=3"]
    assert logged and "duplicate" in logged[0]


def test_load_empty_source(tmp_path):
    path = tmp_path / "empty.txt"
    path.write_text("\n\n", encoding="utf-8")
    with pytest.raises(EmptySource):
        load_candidates(path)
    with pytest.raises(EmptySource):
        load_candidates([])


def test_load_inconsistent_length_names_the_line():
    with pytest.raises(InconsistentLength) as exc:
        load_candidates(["1+1=2", "2+1=3", "10+1=11"])
    assert exc.value.line_no == 3
    assert exc.value.expected == 5
    assert "line 3" in str(exc.value)


def test_load_missing_file(tmp_path):
    with pytest.raises(OSError):
        load_candidates(tmp_path / "nope.txt")


def test_end_to_end_toy_filter():
    mask = compute_mask("1+1=2", "2+1=3")
    assert filter_candidates(TOY, "1+1=2", mask) == ["2+1=3"]


def test_filter_is_monotonic_and_consistent():
    for truth in CLASSIC:
        for guess in CLASSIC:
            mask = compute_mask(guess, truth)
            remaining = filter_candidates(CLASSIC, guess, mask)
            assert set(remaining) <= set(CLASSIC)
            assert truth in remaining
            assert all(compute_mask(guess, c) == mask for c in remaining)


def test_filter_is_idempotent():
    mask = compute_mask("1+2*3=7", "9-2*1=7")
    once = filter_candidates(CLASSIC, "1+2*3=7", mask)
    assert filter_candidates(once, "1+2*3=7", mask) == once


def test_filter_accepts_list_mask():
    mask = list(compute_mask("1+1=2", "2+1=3"))
    assert filter_candidates(TOY, "1+1=2", mask) == ["2+1=3"]


def test_store_is_immutable_universe():
    store = CandidateStore.load(TOY)
    assert store.length == 5
    assert len(store) == 3
    assert "2+1=3" in store.equations

    live = store.live()
    live.remove("1+1=2")
    assert store.equations == tuple(TOY)
    with pytest.raises(AttributeError):
        store.length = 6


def test_load_rejects_invalid_utf8_with_line(tmp_path):
    path = tmp_path / "bad.txt"
    path.write_bytes(b"1+1=2\n2+1=3\n\xff+2=3\n")
    with pytest.raises(UndecodableSource) as exc:
        load_candidates(path)
    assert exc.value.line_no == 3
    assert "line 3" in str(exc.value)
    assert str(path) in str(exc.value)


def test_load_handles_crlf(tmp_path):
    path = tmp_path / "crlf.txt"
    path.write_bytes(b"1+1=2\r\n2+1=3\r\n")
    assert load_candidates(path) == ["1+1=2", "2+1=3"]
