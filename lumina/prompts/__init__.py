from lumina.prompts.system_prompt import SYSTEM_PROMPT, build_messages

__all__ = ["SYSTEM_PROMPT", "build_messages"]
