# Kubernetes collaborators for the explorer.
# Created: 2026-10-18

from podpeek.kube.kubectl import (
    KubectlRunner,
    KubectlTransfer,
    PodTarget,
    run_process,
    shell_join,
)

__all__ = [
    "KubectlRunner",
    "KubectlTransfer",
    "PodTarget",
    "run_process",
    "shell_join",
]
