"""Accelerator/CPU selection for the inference runtimes."""

import logging

logger = logging.getLogger(__name__)

CUDA_PROVIDER = "CUDAExecutionProvider"
CPU_PROVIDER = "CPUExecutionProvider"


def onnx_providers(use_accelerator: bool) -> list[str]:
    """Return the ONNX Runtime provider list to try first.

    CUDA is requested only when asked for and present in the installed
    onnxruntime build; CPU is always the last entry.
    """
    if not use_accelerator:
        return [CPU_PROVIDER]

    import onnxruntime as ort

    if CUDA_PROVIDER in ort.get_available_providers():
        return [CUDA_PROVIDER, CPU_PROVIDER]
    logger.warning("CUDA requested but onnxruntime has no %s; using CPU", CUDA_PROVIDER)
    return [CPU_PROVIDER]


def torch_device(use_accelerator: bool) -> str:
    """Return the torch device string for ultralytics models."""
    if not use_accelerator:
        return "cpu"

    import torch

    if torch.cuda.is_available():
        return "cuda:0"
    logger.warning("CUDA requested but torch reports no GPU; using CPU")
    return "cpu"
