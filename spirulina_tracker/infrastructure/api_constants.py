"""
Generative-text API endpoint constants and configuration.

Centralizing these values makes it easy to swap models or API versions.
"""


class GeminiAPIEndpoints:
    """Generative Language API endpoint paths."""

    API_VERSION = "v1beta"
    GENERATE_CONTENT = f"/{API_VERSION}/models/{{model}}:generateContent"

    @classmethod
    def generate_content(cls, model: str) -> str:
        """
        Get the generateContent endpoint for a model.

        Args:
            model: Model name, e.g. 'gemini-2.5-flash'

        Returns:
            Formatted endpoint path
        """
        return cls.GENERATE_CONTENT.format(model=model)


class APIConstants:
    """General API configuration constants."""

    # HTTP Headers
    CONTENT_TYPE_JSON = "application/json"
    API_KEY_HEADER = "x-goog-api-key"


# Persona sent as the system instruction with every question
ADVISOR_SYSTEM_INSTRUCTION = """\
You are an expert biotechnologist and aquaculturist specialized in small-scale \
and semi-commercial Spirulina (Arthrospira platensis and Arthrospira maxima) \
cultivation. Be practical and patient, explain technical terms simply, prefer \
low-cost do-it-yourself solutions, warn about food safety, and answer using \
Markdown lists and tables where they help.
"""
