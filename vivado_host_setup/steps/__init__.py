from .step_10_preflight import PreflightStep
from .step_20_consent import ConsentStep
from .step_30_rosetta import RosettaStep
from .step_40_select_installer import SelectInstallerStep
from .step_50_prepare_workdir import PrepareWorkdirStep
from .step_60_configure_docker import ConfigureDockerStep
from .step_70_build_image import BuildImageStep
from .step_80_resolution import ResolutionStep
from .step_85_autostart import AutostartStep
from .step_90_launch_container import LaunchContainerStep

__all__ = [
    "PreflightStep",
    "ConsentStep",
    "RosettaStep",
    "SelectInstallerStep",
    "PrepareWorkdirStep",
    "ConfigureDockerStep",
    "BuildImageStep",
    "ResolutionStep",
    "AutostartStep",
    "LaunchContainerStep",
]
