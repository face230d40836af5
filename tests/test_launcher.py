import pytest

from mcinstall.exceptions import LaunchError
from mcinstall.launcher import build_command, launch_server
from mcinstall.models import LaunchConfig


def test_build_command():
    argv = build_command(LaunchConfig(), "paper_server.jar")

    assert argv == ["java", "-Xmx1024M", "-Xms1024M", "-jar", "paper_server.jar", "nogui"]


def test_build_command_custom_java():
    launch = LaunchConfig(java="/opt/jdk/bin/java", jvm_args=["-Xmx4G"], server_args=[])

    assert build_command(launch, "x.jar") == ["/opt/jdk/bin/java", "-Xmx4G", "-jar", "x.jar"]


def test_missing_executable(tmp_path):
    with pytest.raises(LaunchError) as exc_info:
        launch_server([str(tmp_path / "no-such-java"), "-version"], tmp_path)

    assert exc_info.value.context["cwd"] == str(tmp_path)
