"""Dependency declaration snippets for an artifact, one per build tool."""

from __future__ import annotations

from enum import Enum
from typing import Callable

from models.artifact import Artifact


class BuildTool(str, Enum):
    MAVEN = "maven"
    GRADLE = "gradle"
    IVY = "ivy"
    SBT = "sbt"
    LEININGEN = "leiningen"
    GRAPE = "grape"
    BUILDR = "buildr"
    BLD = "bld"


def _present(value: str | None) -> bool:
    return value is not None and value.strip() != ""


def _non_jar(extension: str | None) -> bool:
    """Extensions worth declaring: jar is every tool's default."""
    return _present(extension) and extension.lower() != "jar"


def maven_snippet(g: str, a: str, v: str, c: str | None, p: str | None) -> str:
    lines = [
        "<dependency>",
        f"  <groupId>{g}</groupId>",
        f"  <artifactId>{a}</artifactId>",
        f"  <version>{v}</version>",
    ]
    if _present(c):
        lines.append(f"  <classifier>{c}</classifier>")
    if _non_jar(p):
        lines.append(f"  <type>{p}</type>")
    lines.append("</dependency>")
    return "\n".join(lines) + "\n"


def gradle_snippet(g: str, a: str, v: str, c: str | None, p: str | None) -> str:
    coords = f"{g}:{a}:{v}"
    # Gradle's @extension notation only applies together with a classifier here
    if _present(c):
        coords += f":{c}"
        if _non_jar(p):
            coords += f"@{p}"
    return f'dependencies {{\n    implementation "{coords}"\n}}\n'


def ivy_snippet(g: str, a: str, v: str, c: str | None, p: str | None) -> str:
    out = f'<dependency org="{g}" name="{a}" rev="{v}"'
    if _present(p):
        out += f' type="{p}"'
    if _present(c):
        out += f' classifier="{c}"'
    return out + " />\n"


def sbt_snippet(g: str, a: str, v: str, c: str | None, p: str | None) -> str:
    out = f'libraryDependencies += "{g}" % "{a}" % "{v}"'
    if _present(c):
        out += f' classifier "{c}"'
    return out + "\n"


def leiningen_snippet(g: str, a: str, v: str, c: str | None, p: str | None) -> str:
    out = f'["{g}/{a}" "{v}"'
    if _present(c):
        out += f' :classifier "{c}"'
    if _non_jar(p):
        out += f' :extension "{p}"'
    return out + "]\n"


def grape_snippet(g: str, a: str, v: str, c: str | None, p: str | None) -> str:
    grab = f"    @Grab(group='{g}', module='{a}', version='{v}'"
    if _present(c):
        grab += f", classifier='{c}'"
    if _non_jar(p):
        grab += f", type='{p}'"
    return f"@Grapes(\n{grab})\n)\n"


def buildr_snippet(g: str, a: str, v: str, c: str | None, p: str | None) -> str:
    packaging = p if _present(p) else "jar"
    out = f"compile '{g}:{a}:{packaging}:{v}"
    if _present(c):
        out += f":{c}"
    return out + "'\n"


def bld_snippet(g: str, a: str, v: str, c: str | None, p: str | None) -> str:
    out = f'dependency("{g}", "{a}", "{v}"'
    if _present(c):
        out += f', classifier="{c}"'
    if _non_jar(p):
        out += f', type="{p}"'
    return out + ");\n"


SNIPPET_BUILDERS: dict[BuildTool, Callable[[str, str, str, str | None, str | None], str]] = {
    BuildTool.MAVEN: maven_snippet,
    BuildTool.GRADLE: gradle_snippet,
    BuildTool.IVY: ivy_snippet,
    BuildTool.SBT: sbt_snippet,
    BuildTool.LEININGEN: leiningen_snippet,
    BuildTool.GRAPE: grape_snippet,
    BuildTool.BUILDR: buildr_snippet,
    BuildTool.BLD: bld_snippet,
}


def build_snippet(artifact: Artifact | None, tool: BuildTool | str) -> str:
    """
    Render the dependency declaration of ``artifact`` for ``tool``.

    Returns an empty string when no artifact is selected.
    """
    tool = BuildTool(tool)
    if artifact is None:
        return ""
    return SNIPPET_BUILDERS[tool](
        artifact.group_id,
        artifact.artifact_id,
        artifact.version,
        artifact.classifier,
        artifact.extension,
    )


def build_all_snippets(artifact: Artifact | None) -> dict[str, str]:
    """Snippets for every supported build tool, keyed by tool name."""
    return {tool.value: build_snippet(artifact, tool) for tool in BuildTool}
