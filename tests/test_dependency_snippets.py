import pytest

from models.artifact import Artifact
from utils.dependency_snippets import BuildTool, build_all_snippets, build_snippet

PLAIN = Artifact("org.example", "lib", "1.0", extension="jar")
CLASSIFIED = Artifact("org.example", "lib", "1.0", classifier="tests", extension="zip")


def test_maven_plain_jar_omits_type():
    assert build_snippet(PLAIN, BuildTool.MAVEN) == (
        "<dependency>\n"
        "  <groupId>org.example</groupId>\n"
        "  <artifactId>lib</artifactId>\n"
        "  <version>1.0</version>\n"
        "</dependency>\n"
    )


def test_maven_classifier_and_type():
    snippet = build_snippet(CLASSIFIED, "maven")
    assert "  <classifier>tests</classifier>\n" in snippet
    assert "  <type>zip</type>\n" in snippet


def test_gradle():
    assert build_snippet(PLAIN, BuildTool.GRADLE) == (
        'dependencies {\n    implementation "org.example:lib:1.0"\n}\n'
    )
    assert '"org.example:lib:1.0:tests@zip"' in build_snippet(CLASSIFIED, BuildTool.GRADLE)


def test_gradle_extension_needs_classifier():
    artifact = Artifact("g", "a", "1", extension="pom")
    assert '"g:a:1"' in build_snippet(artifact, BuildTool.GRADLE)


def test_ivy_always_declares_type():
    assert build_snippet(PLAIN, BuildTool.IVY) == (
        '<dependency org="org.example" name="lib" rev="1.0" type="jar" />\n'
    )
    assert build_snippet(CLASSIFIED, BuildTool.IVY).endswith(' type="zip" classifier="tests" />\n')


def test_sbt():
    assert build_snippet(CLASSIFIED, BuildTool.SBT) == (
        'libraryDependencies += "org.example" % "lib" % "1.0" classifier "tests"\n'
    )


def test_leiningen():
    assert build_snippet(PLAIN, BuildTool.LEININGEN) == '["org.example/lib" "1.0"]\n'
    assert build_snippet(CLASSIFIED, BuildTool.LEININGEN) == (
        '["org.example/lib" "1.0" :classifier "tests" :extension "zip"]\n'
    )


def test_grape():
    assert build_snippet(PLAIN, BuildTool.GRAPE) == (
        "@Grapes(\n    @Grab(group='org.example', module='lib', version='1.0')\n)\n"
    )
    assert build_snippet(CLASSIFIED, BuildTool.GRAPE) == (
        "@Grapes(\n    @Grab(group='org.example', module='lib', version='1.0', classifier='tests', type='zip')\n)\n"
    )


def test_buildr_defaults_packaging_to_jar():
    artifact = Artifact("g", "a", "1")
    assert build_snippet(artifact, BuildTool.BUILDR) == "compile 'g:a:jar:1'\n"
    assert build_snippet(CLASSIFIED, BuildTool.BUILDR) == "compile 'org.example:lib:zip:1.0:tests'\n"


def test_bld():
    assert build_snippet(CLASSIFIED, BuildTool.BLD) == (
        'dependency("org.example", "lib", "1.0", classifier="tests", type="zip");\n'
    )


def test_no_artifact_gives_empty_snippet():
    assert build_snippet(None, BuildTool.MAVEN) == ""


def test_unknown_tool_rejected():
    with pytest.raises(ValueError):
        build_snippet(PLAIN, "make")


def test_all_snippets_keyed_by_tool():
    snippets = build_all_snippets(PLAIN)
    assert set(snippets) == {tool.value for tool in BuildTool}
    assert all(snippets.values())
