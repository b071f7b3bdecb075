"""
Interview Prompts and Spoken Scripts.

Prompt templates for question generation and answer feedback, plus the
greeting and farewell lines spoken during a voice interview.
"""

# Exact reply reserved for answers that need no improvement
PERFECT_ANSWER_FEEDBACK = "Loved the answer! You Killed It!"


QUESTION_GENERATION_PROMPT = """You are preparing a mock interview for a {level} {role} role at {company_name}.

Job Description:
{job_description}

Tech stack: {tech_stack}
Focus areas: {focus_areas}

Write exactly {number_of_questions} interview questions a real interviewer for this role would ask.
Mix the focus areas when more than one is given. Each question must stand on its own and be answerable out loud in two to three minutes.

Return one question per line, numbered "1.", "2.", and so on. Do not include any preface, headings, or commentary."""


FEEDBACK_PROMPT = """You are an expert interviewer for a {level} {role} role at {company_name}.
Provide a short, actionable feedback (2-4 bullet points max) on the candidate's answer below. Point out what is missing or unclear and how to improve it.
If the answer is excellent and covers key points succinctly, respond with exactly: "{perfect_answer}"

Question: {question}
Answer: {answer}
Job Description: {job_description}
{focus_line}
Do not include any preface; return only the feedback text."""


GREETING_TEMPLATE = (
    "Hello {first_name}! Welcome to your interview. I'm excited to get to know you "
    "better today. Let's begin with our questions."
)

FAREWELL_TEMPLATE = (
    "Thank you {first_name}! It was lovely speaking with you today. Your interview "
    "has been completed successfully. Best of luck!"
)

# Name used in the farewell when the user record cannot be loaded
FALLBACK_NAME = "there"
