from checker.discovery import make_context
from checker.project import ProjectType
from checker.result import ResultKind
from checker.rules import sketch


def sketch_context(root):
    return make_context(root, ProjectType.SKETCH)


def test_name_mismatch_passes_when_primary_file_matches_folder(make_project):
    context = sketch_context(make_project("Blink", {"Blink.ino": "void setup() {}\n"}))

    assert sketch.name_mismatch(context) == (ResultKind.PASS, "")


def test_name_mismatch_accepts_pde_primary_file(make_project):
    context = sketch_context(make_project("Blink", {"Blink.pde": ""}))

    assert sketch.name_mismatch(context)[0] is ResultKind.PASS


def test_name_mismatch_reports_expected_file_name(make_project):
    context = sketch_context(make_project("Blink", {"my sketch!.ino": ""}))

    assert sketch.name_mismatch(context) == (ResultKind.FAIL, "Blink.ino")


def test_prohibited_characters_in_file_name(make_project):
    context = sketch_context(make_project("Blink", {"my sketch!.ino": ""}))

    assert sketch.prohibited_characters_in_file_name(context) == (ResultKind.FAIL, "my sketch!.ino")


def test_prohibited_characters_ignores_unsupported_extensions(make_project):
    context = sketch_context(make_project("Blink", {"Blink.ino": "", "read me!.txt": ""}))

    assert sketch.prohibited_characters_in_file_name(context)[0] is ResultKind.PASS


def test_file_name_too_long_lists_offending_files(make_project):
    long_name = "a" * 64 + ".h"
    context = sketch_context(make_project("Blink", {"Blink.ino": "", long_name: "", "b" * 63 + ".h": ""}))

    assert sketch.file_name_too_long(context) == (ResultKind.FAIL, long_name)


def test_pde_extension_is_reported(make_project):
    context = sketch_context(make_project("Blink", {"Blink.pde": "", "Extra.pde": ""}))

    assert sketch.pde_extension(context) == (ResultKind.FAIL, "Blink.pde, Extra.pde")


def test_incorrect_src_folder_case(make_project):
    root = make_project("Blink", {"Blink.ino": "", "SRC/helper.h": ""})
    context = sketch_context(root)

    kind, diagnostic = sketch.incorrect_src_folder_case(context)

    assert kind is ResultKind.FAIL
    assert diagnostic.endswith("SRC")


def test_metadata_rules_skip_without_metadata_file(make_project):
    context = sketch_context(make_project("Blink", {"Blink.ino": ""}))

    assert sketch.metadata_json_format(context) == (ResultKind.SKIP, "No metadata file")
    assert sketch.metadata_data_format(context) == (ResultKind.SKIP, "No metadata file")


def test_metadata_json_format_fails_on_invalid_json(make_project):
    context = sketch_context(make_project("Blink", {"Blink.ino": "", "sketch.json": "{not json"}))

    kind, diagnostic = sketch.metadata_json_format(context)

    assert kind is ResultKind.FAIL
    assert diagnostic.startswith("sketch.json:")


def test_metadata_data_format(make_project):
    good = sketch_context(
        make_project("Good", {"Good.ino": "", "sketch.json": '{"cpu": {"fqbn": "arduino:avr:uno"}}'})
    )
    bad = sketch_context(make_project("Bad", {"Bad.ino": "", "sketch.json": '{"cpu": {"fqbn": 1}}'}))

    assert sketch.metadata_json_format(bad)[0] is ResultKind.PASS
    assert sketch.metadata_data_format(good) == (ResultKind.PASS, "")
    assert sketch.metadata_data_format(bad) == (ResultKind.FAIL, "cpu.fqbn must be a string")


def test_metadata_data_format_rejects_non_object(make_project):
    context = sketch_context(make_project("Blink", {"Blink.ino": "", "sketch.json": "[]"}))

    assert sketch.metadata_data_format(context) == (ResultKind.FAIL, "sketch.json must contain an object")
