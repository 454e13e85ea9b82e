from PIL import Image

from image_format_converter.core.converter import BatchRunner, ImageFormatConverter
from image_format_converter.core.events import EventKind
from image_format_converter.core.models import ConverterConfig, OutputFormatSpec, RunState


def _config(root, **kwargs):
    return ConverterConfig(source_root=root, dest_root=root.parent / "dist", **kwargs)


def test_no_input_files_is_a_terminal_state_not_an_error(tmp_path, recording_encoder):
    (tmp_path / "src").mkdir()
    (tmp_path / "src" / "readme.md").write_text("hi", encoding="utf-8")
    events = []

    report = BatchRunner(_config(tmp_path / "src"), recording_encoder(), on_event=events.append).run()

    assert report.state is RunState.NO_INPUT_FILES
    assert report.total_files == 0
    assert report.total_jobs == 0
    assert report.failed_jobs == 0
    assert [event.kind for event in events] == [EventKind.NO_INPUT_FILES]


def test_job_count_is_files_times_formats_plus_one(source_tree, recording_encoder):
    config = _config(source_tree, formats=[OutputFormatSpec("avif"), OutputFormatSpec("webp")])

    report = BatchRunner(config, recording_encoder()).run()

    assert report.state is RunState.COMPLETED
    assert report.total_files == 3
    assert report.total_jobs == 3 * (2 + 1)


def test_failed_job_does_not_stop_later_files(source_tree, recording_encoder):
    report = BatchRunner(_config(source_tree), recording_encoder(fail_formats={"avif"})).run()

    assert report.state is RunState.COMPLETED
    assert report.total_jobs == 6
    assert report.failed_jobs == 3
    assert report.succeeded_jobs == 3
    assert {outcome.format_label for outcome in report.failures} == {"AVIF"}
    dist = source_tree.parent / "dist"
    assert (dist / "top.jpg").exists()
    assert (dist / "a" / "b.png").exists()
    assert (dist / "a" / "deep" / "C.JPEG").exists()


def test_single_file_with_failing_conversion(tmp_path, make_image, recording_encoder):
    root = tmp_path / "src"
    make_image(root / "only.jpg")

    report = BatchRunner(_config(root), recording_encoder(fail_formats={"avif"})).run()

    assert report.total_jobs == 2
    assert report.failed_jobs == 1
    assert report.succeeded_jobs == 1


def test_outcomes_follow_discovery_order_with_concurrent_files(source_tree, recording_encoder):
    config = _config(source_tree, file_concurrency=3)

    report = BatchRunner(config, recording_encoder()).run()

    sources = [outcome.source_path.relative_to(source_tree).as_posix() for outcome in report.outcomes]
    assert sources == ["a/b.png", "a/b.png", "a/deep/C.JPEG", "a/deep/C.JPEG", "top.jpg", "top.jpg"]


def test_progress_is_reported_per_file(source_tree, recording_encoder):
    progress = []

    BatchRunner(_config(source_tree), recording_encoder(), on_progress=lambda done, total: progress.append((done, total))).run()

    assert progress == [(1, 3), (2, 3), (3, 3)]


def test_byte_accounting_counts_successful_jobs(tmp_path, make_image, recording_encoder):
    root = tmp_path / "src"
    source = make_image(root / "only.jpg")
    size = source.stat().st_size

    report = BatchRunner(_config(root), recording_encoder()).run()

    assert report.input_total_bytes == 2 * size
    assert report.output_total_bytes == 10 + 5
    assert report.bytes_saved == 2 * size - 15


def test_converter_runs_on_construction_with_pillow(source_tree):
    config = _config(source_tree, formats=[OutputFormatSpec("webp", 75)], compress_quality=70)

    converter = ImageFormatConverter(config)

    report = converter.report
    assert report.state is RunState.COMPLETED
    assert report.failed_jobs == 0
    dist = source_tree.parent / "dist"
    with Image.open(dist / "a" / "deep" / "C.webp") as image:
        assert image.format == "WEBP"
    with Image.open(dist / "a" / "deep" / "C.JPEG") as image:
        assert image.format == "JPEG"
    with Image.open(dist / "a" / "b.png") as image:
        assert image.format == "PNG"
    assert (source_tree / "top.jpg").exists()


def test_invalid_quality_fails_only_that_job(tmp_path, make_image):
    root = tmp_path / "src"
    make_image(root / "one.jpg")
    make_image(root / "two.png")
    config = _config(root, formats=[OutputFormatSpec("webp", 150)])

    report = ImageFormatConverter(config).report

    assert report.total_jobs == 4
    assert report.failed_jobs == 2
    assert all(outcome.error_type == "EncodeError" for outcome in report.failures)
    assert (root.parent / "dist" / "one.jpg").exists()
    assert (root.parent / "dist" / "two.png").exists()


def test_keep_extension_names(tmp_path, make_image, recording_encoder):
    root = tmp_path / "src"
    make_image(root / "pic.jpeg")

    report = BatchRunner(_config(root, keep_extension=True), recording_encoder()).run()

    assert sorted(outcome.dest_path.name for outcome in report.outcomes) == ["pic.jpeg", "pic.jpeg.avif"]


def test_destination_parent_of_source_still_converts(tmp_path, make_image, recording_encoder):
    root = tmp_path / "public" / "img-src"
    make_image(root / "hero.jpg")
    config = ConverterConfig(source_root=root, dest_root=tmp_path / "public")

    report = BatchRunner(config, recording_encoder()).run()

    assert report.state is RunState.COMPLETED
    assert report.total_files == 1
    assert report.total_jobs == 2
    assert (tmp_path / "public" / "hero.avif").exists()
