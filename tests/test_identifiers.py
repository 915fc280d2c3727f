import pytest

from deferred_apps.errors import ErrorCode, InvalidIdentifierError
from deferred_apps.identifiers import split_identifier, validate_identifier


@pytest.mark.parametrize(
    "value",
    ["hello", "obs-studio", "python313Packages.numpy", "a.b.c", "2048-in-terminal", "foo_bar"],
)
def test_valid_identifiers_are_returned_unchanged(value: str) -> None:
    assert validate_identifier(value) == value


@pytest.mark.parametrize(
    "value",
    ["", ".hidden", "trailing.", "a..b", "foo/bar", "foo bar", "-invalid", "pkgs.-x"],
)
def test_invalid_identifiers_are_rejected(value: str) -> None:
    with pytest.raises(InvalidIdentifierError) as excinfo:
        validate_identifier(value)
    assert excinfo.value.code == ErrorCode.INVALID_IDENTIFIER.value


def test_invalid_identifier_error_names_the_input() -> None:
    with pytest.raises(InvalidIdentifierError) as excinfo:
        validate_identifier("python313Packages.foo bar")
    assert excinfo.value.context["identifier"] == "python313Packages.foo bar"
    assert "spaces" in str(excinfo.value)


def test_split_identifier_returns_segments() -> None:
    assert split_identifier("haskellPackages.pandoc") == ("haskellPackages", "pandoc")
    assert split_identifier("hello") == ("hello",)
