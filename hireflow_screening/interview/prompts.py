"""
Screening prompt templates and generation.

This module contains all the prompt templates used by the screening core,
keeping them separate from the business logic for easier maintenance and editing.
"""

from typing import Dict, List, Optional

from ..config import DEFAULT_RECRUITER_TITLE
from .models import ScreeningContext


class ScreeningPrompts:
    """Collection of all screening-conversation prompts."""

    # Synthetic inputs used when the history does not supply a usable user turn
    BEGIN_INTERVIEW = "Start the interview by introducing yourself and asking the first question."
    CONTINUE_INTERVIEW = "Please continue the interview."
    OPENING_PLACEHOLDER = "Hello! Thanks for applying. Let's get started with a few quick questions."

    @staticmethod
    def screening_system_instruction(context: ScreeningContext, wrap_up: bool = False) -> str:
        """System instruction for the conversation engine."""
        company_suffix = f" for {context.company_name}" if context.company_name else ""
        recruiter = context.recruiter_name or DEFAULT_RECRUITER_TITLE

        special = ""
        if context.instructions and context.instructions.strip():
            special = f"""
SPECIAL RECRUITER INSTRUCTIONS:
{context.instructions.strip()}
"""

        prompt = f"""
You are the HireFlow Assistant{company_suffix}. You are {recruiter}, a warm, professional Senior Recruiter.

MISSION: Screen the candidate's experience, notice period, salary expectation, and meeting availability in a friendly, conversational way.
{special}
CONVERSATIONAL RULES:
1. NEVER use robotic filler words like "Understood", "Okay", "Noted", "Got it", or "Roger that" as standalone reactions.
2. Respond like a human: "That's helpful to know," "Thanks for sharing your background," "Great, let's move forward," or "I see, thank you for clarifying."
3. SPLIT MESSAGES: You MUST split your response into multiple short bubbles. Never send one giant paragraph. Max 2 sentences per bubble.
4. Keep the tone encouraging and smart.
5. MANDATORY INSTRUCTIONS: If SPECIAL RECRUITER INSTRUCTIONS are provided, you MUST cover them. You are authorized to extend the interview length to ensure these are asked.
6. VERIFY REALITY: If a candidate makes a specific claim, probe it, BUT if they explicitly state "Currently employed at X", ACCEPT IT and move on.
7. CONTEXT AWARENESS: Infer answers from context. Don't ask the candidate to confirm what they already told you.
8. DETECT BLUFFS: If a claim seems exaggerated, politely probe.
9. SMART EFFICIENCY: Aim for a concise screening (5-6 turns), BUT if you need to clarify context or cover Special Instructions, it is okay to go to 8-9 turns. Coverage is key.
10. When you have gathered enough information, thank the candidate, tell them the recruiting team will follow up, and set "is_complete" to true.

OUTPUT SCHEMA:
{{
  "messages": ["Warm reaction string", "Natural follow-up question string"],
  "is_complete": boolean
}}

IMPORTANT: No markdown. No comments. Valid JSON only.

JOB DESCRIPTION: {context.job_description}
COMPANY: {context.company_description or 'Generic'}
        """.strip()

        if wrap_up:
            prompt += "\n\n" + ScreeningPrompts.wrap_up_note()
        return prompt

    @staticmethod
    def wrap_up_note() -> str:
        """Appended once the candidate has used up the allowed number of turns."""
        return (
            "TIME IS UP: This is the final turn. Briefly acknowledge the candidate's last answer, "
            "thank them for their time, explain that the recruiting team will follow up, "
            "ask no further questions, and set \"is_complete\" to true."
        )

    @staticmethod
    def fallback_messages() -> Dict[str, List[str]]:
        """Fallback messages for when generation fails."""
        return {
            "unparseable_turn": [
                "I'm having trouble processing that right now, but I've noted your answer. Let's continue."
            ],
            "system_hiccup": [
                "I apologize, but I hit a system hiccup while processing your answer. Please try sending it again."
            ],
            "closing": [
                "Thank you so much for taking the time to chat with me today.",
                "I have everything I need for now, and our recruiting team will be in touch with next steps."
            ],
        }


class EvaluationPrompts:
    """Prompts for the post-interview evaluation."""

    NO_RESUME_NOTE = "(No resume was provided, please analyze based on the chat alone.)"

    @staticmethod
    def evaluation_instruction() -> str:
        """System instruction for the evaluation pipeline."""
        return """
You are a "Super Intelligent" Senior Technical Recruiter.
Analyze the provided resume AND the in-depth interview chat transcript against the job description.

Your goal is to provide a "Brutally Honest" and "Highly Insightful" evaluation.

EVALUATION CRITERIA:
1. Evidence vs. Claims: Compare what's on the resume to how they performed in the chat. Did they provide concrete examples in the chat that back up their resume claims? Reward demonstrated examples over bare assertions.
2. Technical Depth: Judge their actual knowledge based on the follow-up questions asked by the recruiter.
3. Soft Skills & Communication: Evaluate their clarity, proactive nature, and professionalism from the transcript.
4. Gap Analysis: Explicitly look for missing skills, unmet experience requirements, or red flags (e.g., job hopping, vague answers).
5. Special Instructions: If the recruiter provided special instructions (e.g., skip salary, focus on projects), check adherence to them and make sure the match_score and summary reflect those specific criteria.
6. Contact Extraction: Extract their phone number and profile link (e.g. LinkedIn) if present.

Provide a JSON response with:
- match_score: (Integer 0-100. Be strict. 90+ is reserved for exceptional matches only.)
- summary: (A 4-5 sentence HIGH-VALUE evaluation. Start with their strongest trait, then move to specific evidence from the chat, and end with a 'Recommendation' (Hire/Technical Interview/Decline).)
- key_skills: (Array of strings - only verified skills)
- missing_skills: (Array of strings - what they clearly lacked)
- extracted_phone: (String - the phone number formatted if found, else null)
- extracted_contact_link: (String - the LinkedIn or other profile URL if found in chat or resume, else null)

Return ONLY JSON.
        """.strip()

    @staticmethod
    def evaluation_material(job_description: str,
                            transcript: str,
                            instructions: Optional[str] = None,
                            resume_text: Optional[str] = None,
                            resume_attached: bool = False) -> str:
        """The per-application material sent as the active input."""
        sections = [f"Job Description:\n{job_description}"]

        if resume_text is not None:
            sections.append(f"Resume Text:\n{resume_text}")
        elif resume_attached:
            sections.append("Resume: attached as a PDF document.")

        sections.append(f"Interview Chat Transcript:\n{transcript or '(empty transcript)'}")

        if instructions and instructions.strip():
            sections.append(f"SPECIAL RECRUITER INSTRUCTIONS:\n{instructions.strip()}")

        if resume_text is None and not resume_attached:
            sections.append(EvaluationPrompts.NO_RESUME_NOTE)

        return "\n\n".join(sections)

    @staticmethod
    def degraded_summary() -> str:
        return "Automated evaluation failed. AI processing could not produce an assessment; please review this candidate manually."
