"""HTTP clients for the third-party services and their FastAPI dependencies."""

from typing import AsyncIterator

from .appwrite import AppwriteClient
from .elevenlabs import ElevenLabsClient
from .tavus import TavusClient


async def get_identity_client() -> AsyncIterator[AppwriteClient]:
	client = AppwriteClient()
	try:
		yield client
	finally:
		await client.aclose()


async def get_tavus_client() -> AsyncIterator[TavusClient]:
	client = TavusClient()
	try:
		yield client
	finally:
		await client.aclose()


async def get_elevenlabs_client() -> AsyncIterator[ElevenLabsClient]:
	client = ElevenLabsClient()
	try:
		yield client
	finally:
		await client.aclose()


__all__ = [
	"AppwriteClient",
	"ElevenLabsClient",
	"TavusClient",
	"get_elevenlabs_client",
	"get_identity_client",
	"get_tavus_client",
]
