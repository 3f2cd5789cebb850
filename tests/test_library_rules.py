from checker.discovery import make_context
from checker.project import ProjectType
from checker.result import ResultKind
from checker.rules import library

VALID_PROPERTIES = "name=Servo\nversion=1.2.0\n# comment\nauthor=Someone\n"


def library_context(root):
    return make_context(root, ProjectType.LIBRARY)


def test_properties_present_passes_every_field_check(make_project):
    context = library_context(make_project("Servo", {"library.properties": VALID_PROPERTIES}))

    assert library.properties_missing(context) == (ResultKind.PASS, "")
    assert library.properties_format(context) == (ResultKind.PASS, "")
    assert library.name_field(context) == (ResultKind.PASS, "")
    assert library.version_field(context) == (ResultKind.PASS, "")


def test_missing_properties_fails_and_field_rules_skip(make_project):
    context = library_context(make_project("Servo", {"src/Servo.h": ""}))

    kind, diagnostic = library.properties_missing(context)
    assert kind is ResultKind.FAIL
    assert "library.properties" in diagnostic
    assert library.properties_format(context) == (ResultKind.SKIP, "No metadata file")
    assert library.name_field(context) == (ResultKind.SKIP, "No metadata file")


def test_malformed_properties_fail_format_and_skip_fields(make_project):
    context = library_context(make_project("Servo", {"library.properties": "name=Servo\nthis line is broken\n"}))

    kind, diagnostic = library.properties_format(context)

    assert kind is ResultKind.FAIL
    assert "line 2" in diagnostic
    assert library.version_field(context) == (ResultKind.SKIP, "Metadata file could not be parsed")


def test_missing_name_and_invalid_version(make_project):
    context = library_context(make_project("Servo", {"library.properties": "version=one\n"}))

    assert library.name_field(context) == (ResultKind.FAIL, "name field missing or empty")
    assert library.version_field(context) == (ResultKind.FAIL, "version 'one' is not a valid version")


def test_prohibited_characters_in_folder_name(make_project):
    good = library_context(make_project("Servo", {"library.properties": VALID_PROPERTIES}))
    bad = library_context(make_project("My Servo", {"library.properties": VALID_PROPERTIES}))

    assert library.prohibited_characters_in_folder_name(good)[0] is ResultKind.PASS
    assert library.prohibited_characters_in_folder_name(bad) == (ResultKind.FAIL, "My Servo")
