from .base import NoteStore
from .json_file import JsonFileNoteStore
from .supabase import SupabaseNoteStore

__all__ = ["NoteStore", "JsonFileNoteStore", "SupabaseNoteStore"]
