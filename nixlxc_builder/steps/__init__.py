from .step_10_prepare_dir import PrepareDirStep
from .step_20_download_manifest import DownloadManifestStep
from .step_25_select_entry import SelectEntryStep
from .step_30_download_archive import DownloadArchiveStep
from .step_35_verify_size import VerifySizeStep
from .step_40_verify_checksum import VerifyChecksumStep
from .step_50_extract import ExtractStep
from .step_55_fix_resolv_conf import FixResolvConfStep
from .step_60_mount_kernel_fs import MountKernelFsStep
from .step_70_install_nix import InstallNixStep
from .step_80_install_generators import InstallGeneratorsStep

__all__ = [
    "PrepareDirStep",
    "DownloadManifestStep",
    "SelectEntryStep",
    "DownloadArchiveStep",
    "VerifySizeStep",
    "VerifyChecksumStep",
    "ExtractStep",
    "FixResolvConfStep",
    "MountKernelFsStep",
    "InstallNixStep",
    "InstallGeneratorsStep",
]
