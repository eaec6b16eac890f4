"""Record assembly components."""

from .record_assembler import RecordAssembler

__all__ = ['RecordAssembler']
