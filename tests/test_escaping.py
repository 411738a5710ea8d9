"""
Tests for command construction and the shell and AppleScript quoting layers.
"""

import os
import re
import subprocess

import pytest

from claude_launcher.launcher import (
    applescript_escape,
    build_command,
    manual_command,
    render_shell_command,
    shell_escape,
)
from claude_launcher.launcher.terminals import TerminalApp


def applescript_unescape(value):
    return re.sub(r'\\(["\\])', r"\1", value)


def shell_unescape(value):
    """Undo double-quote escaping the way sh reads a "..." string"""
    return re.sub(r'\\(["\\$`])', r"\1", value)


class TestBuildCommand:
    """Test logical command construction"""

    def test_plain_command(self):
        command = build_command("/work")
        assert command.flag is None
        assert render_shell_command(command) == 'cd "/work" && claude'

    def test_resume_command(self):
        """Resuming passes the session id with -r."""
        command = build_command("/work", session_id="abc-123")
        assert render_shell_command(command) == 'cd "/work" && claude -r "abc-123"'

    def test_add_dir_command(self):
        """Opening a project passes the directory with --add-dir."""
        command = build_command("/work", add_dir="/work/sub")
        assert render_shell_command(command) == 'cd "/work" && claude --add-dir "/work/sub"'

    def test_custom_cli_binary(self):
        command = build_command("/work", cli_binary="claude-beta")
        assert render_shell_command(command).endswith("&& claude-beta")

    def test_resume_and_add_dir_are_exclusive(self):
        """A single launch cannot both resume and add a directory."""
        with pytest.raises(ValueError):
            build_command("/work", session_id="abc", add_dir="/other")


class TestEscaping:
    """Test each quoting layer on hostile input"""

    def test_shell_escape_specials(self):
        """Backslashes are doubled first, then quotes and expansions escaped."""
        assert shell_escape('a"b') == 'a\\"b'
        assert shell_escape("$HOME") == "\\$HOME"
        assert shell_escape("`id`") == "\\`id\\`"
        assert shell_escape("a\\b") == "a\\\\b"
        assert shell_escape("it's") == "it's"

    def test_applescript_escape(self):
        assert applescript_escape('say "hi" \\ bye') == 'say \\"hi\\" \\\\ bye'

    def test_hostile_path_round_trips_through_both_layers(self):
        """Unwinding AppleScript then shell escaping gives back the path."""
        directory = '/tmp/a"b\\c'
        line = render_shell_command(build_command(directory, session_id="s1"))
        script_literal = applescript_escape(line)

        shell_line = applescript_unescape(script_literal)
        assert shell_line == line

        quoted = re.match(r'cd "((?:[^"\\]|\\.)*)" && ', shell_line).group(1)
        assert shell_unescape(quoted) == directory

    def test_expansion_is_neutralized(self):
        """Command substitution in a path stays literal text."""
        line = render_shell_command(build_command("/tmp/$(rm -rf ~)/`whoami`"))
        assert line == 'cd "/tmp/\\$(rm -rf ~)/\\`whoami\\`" && claude'

    def test_manual_command_is_shell_line(self):
        """The manual fallback has shell escaping but no AppleScript layer."""
        command = build_command('/tmp/a"b', session_id="s1")
        assert manual_command(command) == 'cd "/tmp/a\\"b" && claude -r "s1"'

    def test_script_embeds_escaped_line_once(self):
        """The AppleScript carries the shell line with exactly one more layer."""
        terminal = TerminalApp("Terminal", "Terminal.app", uses_applescript=True)
        line = render_shell_command(build_command('/tmp/a"b'))
        script = terminal.applescript(line)
        assert f'do script "{applescript_escape(line)}"' in script
        assert 'cd \\"/tmp/a\\\\\\"b\\" && claude' in script

    def test_bang_is_single_quoted(self):
        """History expansion never sees a bare ! inside double quotes."""
        assert shell_escape("wow!proj") == "wow\"'!'\"proj"
        line = render_shell_command(build_command("/Users/x/wow!proj"))
        assert line == "cd \"/Users/x/wow\"'!'\"proj\" && claude"

    @pytest.mark.skipif(os.name != "posix", reason="needs a POSIX shell")
    def test_shell_reads_back_hostile_value(self):
        """A real shell turns the escaped text back into the exact value."""
        value = 'a"b\\c $HOME `id` wow!proj it\'s'
        script = f'printf %s "{shell_escape(value)}"'
        output = subprocess.run(["sh", "-c", script], capture_output=True, text=True, check=True)
        assert output.stdout == value
