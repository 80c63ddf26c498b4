"""Services that combine the engines into larger workflows."""

from services.specification import SystemSpecification, generate_specification

__all__ = ["SystemSpecification", "generate_specification"]
