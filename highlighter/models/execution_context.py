# models/execution_context.py
from __future__ import annotations
from dataclasses import dataclass
import os

import torch
from dotenv import load_dotenv

# Load environment variables
load_dotenv()


@dataclass(frozen=True)
class ExecutionContext:
    """
    Which torch device runs the blend kernel, and in what float precision.

    Passed explicitly into every blend call; nothing here is process-wide.
    """
    device: str = "cpu"
    compute_dtype: torch.dtype = torch.float32

    @classmethod
    def auto(cls) -> ExecutionContext:
        # Use CUDA on NVIDIA, MPS on Apple Silicon, CPU otherwise
        if torch.cuda.is_available():
            return cls(device="cuda")
        if hasattr(torch.backends, "mps") and torch.backends.mps.is_available():
            return cls(device="mps")
        return cls(device="cpu")

    @classmethod
    def from_env(cls) -> ExecutionContext:
        """
        ``HIGHLIGHT_DEVICE`` = auto | cpu | cuda | cuda:N | mps  (default: auto)
        """
        device = os.getenv("HIGHLIGHT_DEVICE", "auto").strip().lower()
        if device in ("", "auto"):
            return cls.auto()
        return cls(device=device)

    @property
    def torch_device(self) -> torch.device:
        return torch.device(self.device)
