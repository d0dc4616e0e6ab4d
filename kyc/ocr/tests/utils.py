import io

from PIL import Image


def gradient_image(size=(400, 400), mode="RGB") -> Image.Image:
    # dégradé lisse : se compresse très bien en JPEG, pas du tout en BMP/TIFF
    return Image.linear_gradient("L").resize(size).convert(mode)


def image_bytes(size=(400, 400), fmt="BMP", mode="RGB") -> bytes:
    buf = io.BytesIO()
    gradient_image(size, mode).save(buf, format=fmt)
    return buf.getvalue()


def open_image(content: bytes) -> Image.Image:
    img = Image.open(io.BytesIO(content))
    img.load()
    return img
