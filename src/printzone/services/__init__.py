"""Service layer — orchestrates the pure pipeline and reports ServiceResult."""
