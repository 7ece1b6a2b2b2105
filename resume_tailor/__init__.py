"""Resume Tailor: LLM-assisted resume and cover letter tailoring."""

__version__ = "0.1.0"
