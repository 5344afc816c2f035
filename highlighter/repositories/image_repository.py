from pathlib import Path
from typing import Union
import numpy as np
import cv2
import torch
from PIL import Image as PILImage

from ..exceptions import DecodeError, InternalComputeError, ShapeError
from ..models.image import Image


class ImageRepository:
    """
    Codec and format conversions for RGB pixel buffers.

    Everything that touches OpenCV / PIL lives here; services only ever see
    (H, W, 3) uint8 RGB numpy arrays.
    """

    @staticmethod
    def create_image(pixels: np.ndarray, path: Union[str, Path] = None) -> Image:
        if path is None:
            return Image(pixels)
        return Image(pixels=pixels, path=Path(path))

    # ─── encoded bytes ────────────────────────────────────────────────
    @staticmethod
    def decode(data: Union[bytes, bytearray, memoryview]) -> np.ndarray:
        """PNG/JPEG/... bytes → RGB pixels. Alpha is dropped, gray is expanded."""
        buf = np.frombuffer(data, dtype=np.uint8)
        if buf.size == 0:
            raise DecodeError("Cannot decode an empty byte buffer")

        arr_bgr = cv2.imdecode(buf, cv2.IMREAD_COLOR)
        if arr_bgr is None:
            raise DecodeError(f"Malformed or unsupported image data ({buf.size} bytes)")
        return np.ascontiguousarray(arr_bgr[:, :, ::-1])

    @staticmethod
    def encode(pixels: np.ndarray, ext: str = ".png") -> bytes:
        """RGB pixels → encoded bytes; *ext* picks the format (".png", ".jpg", ...)."""
        try:
            ok, encoded = cv2.imencode(ext, np.ascontiguousarray(pixels[:, :, ::-1]))
        except cv2.error as err:
            raise InternalComputeError(f"OpenCV could not encode image as {ext}: {err}") from err
        if not ok:
            raise InternalComputeError(f"OpenCV could not encode image as {ext}")
        return encoded.tobytes()

    # ─── decoded handles ──────────────────────────────────────────────
    @staticmethod
    def from_pil(handle: PILImage.Image) -> np.ndarray:
        if handle.mode != "RGB":
            handle = handle.convert("RGB")
        return np.array(handle, dtype=np.uint8)

    @staticmethod
    def to_pil(pixels: np.ndarray) -> PILImage.Image:
        np_img = pixels
        if not np_img.flags['C_CONTIGUOUS']:
            np_img = np.ascontiguousarray(np_img)
        return PILImage.fromarray(np_img)

    # ─── tensors ──────────────────────────────────────────────────────
    @staticmethod
    def from_tensor(tensor: torch.Tensor) -> np.ndarray:
        """(H, W, 3) uint8 tensor on any device → numpy copy on the CPU."""
        if tensor.dtype != torch.uint8:
            raise ShapeError(f"Expected a uint8 tensor, got {tensor.dtype}")
        return tensor.detach().cpu().numpy().copy()

    @staticmethod
    def to_tensor(pixels: np.ndarray, like: torch.Tensor) -> torch.Tensor:
        """Pixels back to a tensor living on the same device as *like*."""
        return torch.from_numpy(np.ascontiguousarray(pixels)).to(like.device)

    # ─── files ────────────────────────────────────────────────────────
    @staticmethod
    def load(path: Union[str, Path]) -> Image:
        path = Path(path)
        arr_bgr = cv2.imread(str(path), cv2.IMREAD_COLOR)
        if arr_bgr is None:
            raise FileNotFoundError(f"Image not found or unreadable: {path}")
        return Image(pixels=np.ascontiguousarray(arr_bgr[:, :, ::-1]), path=path)

    @staticmethod
    def save(image: Image) -> None:
        if image.path is None:
            raise ValueError("Image has no path to save to")
        PILImage.fromarray(image.pixels).save(image.path)
