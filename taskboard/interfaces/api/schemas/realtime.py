"""Schemas for the realtime channel endpoints."""

from pydantic import BaseModel, Field


class ChannelAuthResponse(BaseModel):
    auth: str = Field(..., description="Concesión firmada para suscribirse al canal")
    channel_name: str
    socket_id: str
