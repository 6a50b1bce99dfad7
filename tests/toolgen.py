"""Shell-script stand-ins for JDK tools."""

import stat
import sys
from pathlib import Path

import pytest

posix_only = pytest.mark.skipif(sys.platform == "win32", reason="fake JDK tools are shell scripts")


def write_script(path: Path, body: str) -> Path:
    """Write an executable /bin/sh script."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("#!/bin/sh\n" + body, encoding="utf-8")
    path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return path


# Logs its arguments, creates <output>/bin/java and prints some progress lines
FAKE_JLINK = """\
echo "$@" >> "$(dirname "$0")/../jlink.log"
out=""
while [ $# -gt 0 ]; do
  if [ "$1" = "--output" ]; then out="$2"; shift; fi
  shift
done
mkdir -p "$out/bin" "$out/lib"
printf '#!/bin/sh\\n' > "$out/bin/java"
chmod +x "$out/bin/java"
printf 'modules' > "$out/lib/modules"
i=0
while [ $i -lt 25 ]; do
  echo "Linking step $i"
  i=$((i+1))
done
exit 0
"""

FAILING_JLINK = """\
echo "Error: module not found: no.such.module" >&2
exit 3
"""

# Exits 0 without producing a launcher
HOLLOW_JLINK = """\
exit 0
"""


def fake_jdeps(modules: str, exit_code: int = 0) -> str:
    """jdeps stand-in printing ``modules`` and counting its invocations."""
    return (
        'echo x >> "$(dirname "$0")/../jdeps.calls"\n'
        f'echo "{modules}"\n'
        f"exit {exit_code}\n"
    )


def jdeps_calls(home: Path) -> int:
    calls = home / "jdeps.calls"
    if not calls.exists():
        return 0
    return len(calls.read_text().splitlines())
