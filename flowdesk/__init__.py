"""FlowDesk: department/task/team dashboard backed by Supabase."""

__version__ = "1.0.0"
