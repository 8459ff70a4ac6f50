"""
Centralized prompt text.

Production rule:
NEVER hardcode prompts inside workflow or model client.
Always import from here.
"""


DOCUMENT_QA_SYSTEM_PROMPT = (
    "You are a helpful assistant that answers questions based on the "
    "provided document content. "
)


DOCUMENT_INSTRUCTIONS = (
    "Please answer the user's question based on the information in the "
    "document above. "
    "If the answer is not found in the document, please say so clearly. "
    "Provide specific references to the document content when possible."
)


NO_DOCUMENT_INSTRUCTIONS = (
    "Please answer the user's question to the best of your ability."
)


TRUNCATION_MARKER = "... [Content truncated]"

DEFAULT_DOCUMENT_NAME = "uploaded file"


DEMO_RESPONSE_TEMPLATE = """This is a demo response for your question: "{question}".

In a real implementation, this would be answered using AI based on the document content.

To get real AI responses, please:
1. Set GEMINI_API_KEY to your Google AI API key
2. Ensure you have sufficient API credits
3. Set up proper billing on your Google AI account."""


WELCOME_MESSAGE_TEMPLATE = (
    'I\'ve successfully processed "{name}" ({size_kb:.1f}KB). '
    "The document content is now loaded and ready for Q&A. "
    "You can ask me any questions about the content!"
)


ERROR_MESSAGE_PREFIX = "Sorry, I encountered an error. "
