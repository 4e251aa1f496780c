"""Infrastructure layer: storage, OCR and LLM adapters."""
