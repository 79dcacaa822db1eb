"""
Assistant persona, summarization and reply-drafting prompts.
"""


class AssistantPrompts:
    """System instructions and prompt builders for every generative call."""

    PERSONA_SYSTEM = (
        "You are CJ's Assistant, a helpful, friendly, and concise AI chatbot in a "
        "private chatroom. Keep your responses short and informal."
    )

    SUMMARY_SYSTEM = (
        "You are a concise summarization bot. Your task is to provide a single, "
        "easy-to-read paragraph summary of the following chat transcript, focusing "
        "on the main topics and key decisions. Start with 'Key Summary:'."
    )

    DRAFT_SYSTEM = (
        "You are a helpful assistant drafting a natural, friendly reply for a user "
        "named '{me}'. The response should be based on the last message received "
        "from '{other}'. Write a short, single-sentence response. Do NOT use "
        "quotation marks. Only output the suggested reply text, without any "
        "introductory phrases."
    )

    # User-facing fallbacks
    NO_RESPONSE = "Sorry, I couldn't generate a response right now."
    NO_MESSAGES_TO_SUMMARIZE = "No messages to summarize."
    SUMMARY_MISSING = "Could not generate summary."
    SUMMARY_ERROR = "Error generating summary. Please try again."
    DRAFT_SENTINEL = "Couldn't draft a reply."
    DRAFT_MISSING = "That's a good question!"

    @staticmethod
    def summary_prompt(transcript: str, message_count: int) -> str:
        return (
            f"Please summarize this chat transcript, which contains {message_count} "
            f"messages:\n\n---\n{transcript}\n---"
        )

    @classmethod
    def draft_system(cls, me: str, other: str) -> str:
        return cls.DRAFT_SYSTEM.format(me=me, other=other)

    @staticmethod
    def draft_prompt(last_message: str, me: str) -> str:
        return (
            f'The last message received was: "{last_message}". '
            f"Suggest a friendly reply for '{me}'."
        )
