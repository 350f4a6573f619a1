from frz.index import AttributeEntry, FileEntry, IndexData
from frz.progress import IndexProgress


def test_empty_tracker_has_no_status():
    progress = IndexProgress()
    assert progress.status([]) == ("", False)


def test_unknown_totals_tracker_is_empty():
    progress = IndexProgress.with_unknown_totals()
    assert progress.status([]) == ("", False)


def test_partial_progress_shows_ratio():
    progress = IndexProgress()
    progress.record_indexed([("files", 3)])
    progress.set_totals([("files", 10)])
    text, complete = progress.status([])
    assert text == "Indexed files: 3/10"
    assert complete is False


def test_unknown_total_shows_indexed_count():
    progress = IndexProgress()
    progress.record_indexed([("files", 7)])
    text, complete = progress.status([])
    assert text == "Indexed files: 7"
    assert complete is False


def test_reaching_total_completes():
    progress = IndexProgress()
    progress.set_totals([("files", 5)])
    progress.record_indexed([("files", 5)])
    text, complete = progress.status([])
    assert text == "Indexed files: 5"
    assert complete is True


def test_zero_total_is_complete():
    progress = IndexProgress()
    progress.set_totals([("files", 0)])
    assert progress.status([])[1] is True
    assert progress.status([])[0].endswith(": 0")


def test_labels_replace_keys():
    progress = IndexProgress()
    progress.record_indexed([("files", 2)])
    text, _ = progress.status([("files", "Files")])
    assert text.startswith("Indexed Files:")
    assert "files" not in text


def test_recorded_counts_never_decrease():
    progress = IndexProgress()
    progress.record_indexed([("files", 4)])
    progress.record_indexed([("files", 1)])
    text, _ = progress.status([])
    assert text == "Indexed files: 4"


def test_smaller_total_keeps_previous_total():
    progress = IndexProgress()
    progress.set_totals([("files", 10)])
    progress.record_indexed([("files", 2)])
    progress.set_totals([("files", 5)])
    assert progress.status([])[0] == "Indexed files: 2/10"


def test_total_below_indexed_is_raised_to_indexed():
    progress = IndexProgress()
    progress.record_indexed([("files", 8)])
    progress.set_totals([("files", 3)])
    text, complete = progress.status([])
    assert text == "Indexed files: 8"
    assert complete is True


def test_segments_follow_registration_order():
    progress = IndexProgress()
    progress.register_dataset("zeta")
    progress.register_dataset("alpha")
    progress.register_dataset("zeta")
    text, _ = progress.status([])
    segments = text.split(" • ")
    assert len(segments) == 2
    assert segments[0].startswith("Indexed zeta:")
    assert segments[1].startswith("Indexed alpha:")


def test_completion_requires_every_dataset():
    progress = IndexProgress()
    progress.set_totals([("files", 1), ("attributes", 2)])
    progress.record_indexed([("files", 1)])
    assert progress.status([])[1] is False
    progress.record_indexed([("attributes", 2)])
    assert progress.status([])[1] is True


def test_mark_complete_overrides_totals():
    progress = IndexProgress()
    progress.record_indexed([("files", 1)])
    progress.mark_complete()
    assert progress.status([])[1] is True


def test_refresh_from_data_uses_datasets():
    progress = IndexProgress()
    data = IndexData()
    progress.refresh_from_data(data, [("files", 4)])
    text, complete = progress.status([])
    assert text == "Indexed files: 4"
    assert complete is True


def test_refresh_from_data_falls_back_to_data_lengths():
    progress = IndexProgress()
    data = IndexData(
        files=[FileEntry("a.txt"), FileEntry("b.txt")],
        attributes=[AttributeEntry("tag", 2)],
    )
    progress.refresh_from_data(data, [])
    text, complete = progress.status([])
    segments = text.split(" • ")
    assert segments[0] == f"Indexed attributes: {len(data.attributes)}"
    assert segments[1] == f"Indexed files: {len(data.files)}"
    assert complete is True