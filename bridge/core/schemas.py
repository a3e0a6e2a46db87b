from pydantic import BaseModel


# =========================
# CODEC
# =========================
class CodecRequest(BaseModel):
    value: str


class CodecResponse(BaseModel):
    value: str


# =========================
# GENERATION
# =========================
class GenerationRequest(BaseModel):
    prompt: str


class GenerationResponse(BaseModel):
    model: str
    response: str


# =========================
# MISC
# =========================
class MessageResponse(BaseModel):
    message: str
