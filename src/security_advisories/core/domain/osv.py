from __future__ import annotations

from pydantic import BaseModel, Field


class OsvPackage(BaseModel):
	"""Package coordinates inside an ``affected`` entry"""
	ecosystem: str
	name: str
	purl: str


class OsvAffected(BaseModel):
	"""Affected package and the concrete published versions"""
	package: OsvPackage
	versions: list[str] = Field(default_factory=list)


class OsvReference(BaseModel):
	type: str
	url: str


class OsvRecord(BaseModel):
	"""Exported OSV document; field order is the serialization order"""
	id: str
	modified: str
	published: str
	aliases: list[str] = Field(default_factory=list)
	related: list[str] = Field(default_factory=list)
	summary: str = ""
	details: str = ""
	affected: list[OsvAffected] = Field(default_factory=list)
	references: list[OsvReference] = Field(default_factory=list)
