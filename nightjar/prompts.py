"""
Prompts for AI-assisted analysis of Launch implementation components.
"""

ANALYST_SYSTEM_PROMPT = """You are an Adobe Analytics and Adobe Launch expert assistant. Provide detailed, technically accurate analysis of Adobe Launch implementation components."""


RULE_ANALYSIS_PROMPT = """Analyze this Adobe Launch rule named "{name}". Explain what it does, when it fires, and any potential concerns or best practices to consider."""


DATA_ELEMENT_ANALYSIS_PROMPT = """Analyze this Adobe Launch data element named "{name}". Explain what type of data element it is, what data it collects, and any potential concerns or best practices to consider."""


VARIABLE_ANALYSIS_PROMPT = """Analyze how the Adobe Analytics variable "{name}" is used across rules in this implementation. Explain its purpose, what kind of data it likely captures, and any potential concerns or best practices to consider."""


def build_user_message(prompt: str, data_json: str) -> str:
    return f"{prompt}\n\nHere is the data to analyze:\n\n{data_json}"
