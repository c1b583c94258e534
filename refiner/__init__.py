"""Cloze Refiner: LLM-assisted Anki cloze cleanup with deterministic repairs."""
