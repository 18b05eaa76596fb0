"""Single source of truth for upload file extensions and content types."""

# Matches the upload filter of the browser client: raster formats the captioning models accept.
IMAGE_EXTENSIONS = {".jpg", ".jpeg", ".png", ".gif"}

IMAGE_EXTENSIONS_LIST = sorted(IMAGE_EXTENSIONS)

# Pillow format name -> MIME type, for formats we accept
PILLOW_FORMAT_MIME = {
    "JPEG": "image/jpeg",
    "PNG": "image/png",
    "GIF": "image/gif",
}
