import pytest

from archzfs_installer.credentials import collect_credentials, collect_user_setup
from archzfs_installer.errors import PromptError

from conftest import make_prompter


def test_collect_credentials_strips_and_lowercases():
    prompter = make_prompter(" alice ", "secret", "AMD")
    creds = collect_credentials(prompter)

    assert (creds.username, creds.password, creds.platform) == ("alice", "secret", "amd")
    shown = prompter.stdout.getvalue()
    assert "Enter username: " in shown
    assert "Enter your Platform in Lower Case(intel/amd): " in shown


@pytest.mark.parametrize(
    "lines",
    [
        ("", "secret", "intel"),
        ("alice", "  ", "intel"),
        ("alice", "secret", "arm"),
        ("alice", "secret"),
    ],
)
def test_collect_credentials_rejects_bad_input(lines):
    with pytest.raises(PromptError):
        collect_credentials(make_prompter(*lines))


def test_user_setup_defaults_dotfiles():
    setup = collect_user_setup(make_prompter("alice", "", ""), default_dotfiles="https://x/d.git")
    assert setup.username == "alice"
    assert setup.dotfiles_source == "https://x/d.git"
    assert setup.apply_profile is False


def test_user_setup_with_known_username():
    prompter = make_prompter("https://y/dots.git", "yes")
    setup = collect_user_setup(prompter, default_dotfiles="https://x/d.git", username="bob")

    assert setup == type(setup)(username="bob", dotfiles_source="https://y/dots.git", apply_profile=True)
    assert "Enter username" not in prompter.stdout.getvalue()


def test_confirm_rejects_nonsense():
    with pytest.raises(PromptError):
        collect_user_setup(make_prompter("alice", "", "maybe"), default_dotfiles="d")
