"""Uniform buffer offsets and sampler binding slots."""

from dataclasses import dataclass

from loguru import logger

from fx2glsl.codegen.models import Type

# Bytes per scalar component in a uniform buffer
COMPONENT_SIZE = 4


def align(address: int, alignment: int) -> int:
    """Round an address up to the next multiple of an alignment."""
    if address % alignment != 0:
        return address + alignment - address % alignment
    return address


def uniform_size(type_: Type) -> int:
    """Get the buffer size of a uniform, three-row types are padded to four rows."""
    rows = 4 if type_.rows == 3 else type_.rows
    return COMPONENT_SIZE * rows * type_.cols * max(1, type_.array_length)


@dataclass
class ResourceLayout:
    """Running cursors of the resource layout for one compilation unit.

    Attributes:
        cbuffer_offset: Next free byte in the ``_Globals`` buffer
        sampler_binding: Next free sampler binding slot
    """

    cbuffer_offset: int = 0
    sampler_binding: int = 0

    def place_uniform(self, type_: Type) -> tuple[int, int]:
        """Allocate buffer space for a uniform.

        The alignment of a uniform equals its size.

        Args:
            type_: Type of the uniform

        Returns:
            Tuple of (offset, size) in bytes
        """
        size = uniform_size(type_)
        offset = align(self.cbuffer_offset, size)
        self.cbuffer_offset = offset + size
        logger.debug(f"Placed uniform of {size} bytes at offset {offset}")
        return offset, size

    def next_sampler_binding(self) -> int:
        """Allocate the next sampler binding slot."""
        binding = self.sampler_binding
        self.sampler_binding += 1
        return binding
