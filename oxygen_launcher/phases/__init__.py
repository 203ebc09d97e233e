from .install_package import InstallPackagePhase
from .run_app import RunAppPhase
from .update_toolchain import UpdateToolchainPhase

__all__ = [
    "UpdateToolchainPhase",
    "InstallPackagePhase",
    "RunAppPhase",
]
