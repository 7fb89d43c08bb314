from .share_caption import ShareCaptionSignature

__all__ = ["ShareCaptionSignature"]
