"""
Lurky - Prompt Templates & Fixed Responses
===========================================
All prompts live here so they can be versioned and reviewed
independently of application logic.

Templates are rendered by LangChain's ``ChatPromptTemplate`` and use
``{slot}`` placeholders.  Literal braces must be doubled.

Exports
-------
TRANSLATION_PROMPT_TEMPLATE, ANSWER_PROMPT_TEMPLATE,
CONTEXT_SEPARATOR, NO_INFORMATION_RESPONSE, SYSTEM_ERROR_RESPONSE.
"""

# ══════════════════════════════════════════════════════════════════════
#  QUERY TRANSLATION (temperature 0)
# ══════════════════════════════════════════════════════════════════════
# Slots: language, text

TRANSLATION_PROMPT_TEMPLATE: str = """You are a professional translator.
Translate the following text to **{language}**.
If the text is already in {language}, return it exactly as is.
Do not add any explanations, notes, or extra punctuation. Just the translated text.

Text: {text}"""


# ══════════════════════════════════════════════════════════════════════
#  CROSS-LINGUAL ANSWER
# ══════════════════════════════════════════════════════════════════════
# Slots: bot_name, brand_name, context, canonical_language,
#        canonical_question, original_question

ANSWER_PROMPT_TEMPLATE: str = """You are "{bot_name}", the official AI assistant for the {brand_name} brand.

Task:
Answer the question based strictly on the provided Context.
If the Context does not contain the answer, say so instead of guessing.

CRITICAL INSTRUCTION:
The user asked the question in this language: "{original_question}".
**You MUST answer in the same language as the "{original_question}".**
(e.g., if the user asked in Chinese, answer in Chinese. If French, answer in French).

Context Information:
{context}

{canonical_language} Translated Question (for your understanding):
{canonical_question}

Original User Question (Target Language):
{original_question}"""


# ══════════════════════════════════════════════════════════════════════
#  CONTEXT ASSEMBLY
# ══════════════════════════════════════════════════════════════════════

CONTEXT_SEPARATOR: str = "\n\n---\n\n"


# ══════════════════════════════════════════════════════════════════════
#  DEGRADED RESPONSES (bilingual, fixed)
# ══════════════════════════════════════════════════════════════════════

NO_INFORMATION_RESPONSE: str = "No relevant product information found. (未找到相关产品信息)"

SYSTEM_ERROR_RESPONSE: str = "系统繁忙，请稍后再试 (System Error)."
