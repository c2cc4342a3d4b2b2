"""
ai_service.py: Prompt construction for every AI feature.
Each method asks the LLM router first and falls back to a deterministic,
rule-based answer when no provider is configured or the call fails.
"""

import json
import logging
import math
import re
from collections import Counter
from datetime import datetime

from cortexia.config import ASSISTANT_NAME
from cortexia.utils import utcnow, parse_datetime

logger = logging.getLogger(__name__)

_JSON_OBJECT = re.compile(r"\{[\s\S]*\}")


class AIService:
    @staticmethod
    async def _complete(llm_router, prompt: str, cache_ttl: int = 0) -> str | None:
        """Single-prompt completion. Returns None whenever the router reports an error."""
        if llm_router is None:
            return None
        resp = await llm_router.route([{"role": "user", "content": prompt}], cache_ttl=cache_ttl)
        if resp.get("status") != "success" or not resp.get("text"):
            logger.warning(f"AI fallback used: {resp.get('error')}")
            return None
        return resp["text"].strip()

    @staticmethod
    async def calculate_task_priority(task: dict, llm_router) -> dict:
        """Score a task 0-100 with a short reasoning."""
        lines = [
            "Analyze this task and assign a priority score from 0-100 where:",
            "- 90-100: Critical, blocking everything else",
            "- 70-89: High priority, urgent",
            "- 40-69: Medium priority, important",
            "- 20-39: Low priority, nice to have",
            "- 0-19: Optional, can wait",
            "",
            "Task details:",
            f"- Title: {task.get('title')}",
        ]
        if task.get("description"):
            lines.append(f"- Description: {task['description']}")
        if task.get("due_date"):
            lines.append(f"- Due date: {task['due_date']}")
        if task.get("domain"):
            lines.append(f"- Category: {task['domain']}")
        lines += [
            "",
            "Respond in JSON format only:",
            '{"score": <number 0-100>, "reasoning": "<brief explanation in 1-2 sentences>"}',
        ]

        text = await AIService._complete(llm_router, "\n".join(lines))
        if text:
            match = _JSON_OBJECT.search(text)
            if match:
                try:
                    parsed = json.loads(match.group(0))
                    return {
                        "score": min(100, max(0, float(parsed["score"]))),
                        "reasoning": parsed.get("reasoning", ""),
                    }
                except (ValueError, KeyError, TypeError) as e:
                    logger.warning(f"AI priority parsing error: {e}")

        return {
            "score": 70 if task.get("due_date") else 50,
            "reasoning": "Using rule-based priority calculation",
        }

    @staticmethod
    def prioritize_tasks(tasks: list[dict], now: datetime | None = None) -> list[dict]:
        """Rule-based urgency score for each task, highest first."""
        now = now or utcnow()
        prioritized = []
        for task in tasks:
            score = 50

            due = parse_datetime(task.get("due_date"))
            if due is not None:
                days_until_due = math.ceil((due - now).total_seconds() / 86400)
                if days_until_due < 0:
                    score += 30
                elif days_until_due == 0:
                    score += 25
                elif days_until_due <= 2:
                    score += 20
                elif days_until_due <= 7:
                    score += 10

            priority = task.get("priority")
            if priority == "urgent":
                score += 25
            elif priority == "high":
                score += 15
            elif priority == "low":
                score -= 10

            if task.get("domain") == "work":
                score += 5
            if task.get("domain") == "health":
                score += 3

            prioritized.append({**task, "ai_score": min(100, max(0, score))})

        prioritized.sort(key=lambda t: t["ai_score"], reverse=True)
        return prioritized

    @staticmethod
    async def generate_life_score_explanation(data: dict, llm_router) -> str:
        """
        data: {score, tasks: {pending, completed}, habits: {done, total},
               budget: {spent, limit}, goals: {on_track, total}}
        """
        tasks, habits, budget, goals = data["tasks"], data["habits"], data["budget"], data["goals"]
        prompt = (
            "Generate a concise life status explanation (max 60 words) based on these metrics:\n\n"
            f"Overall Score: {data['score']}/100\n"
            f"Tasks: {tasks['completed']} done, {tasks['pending']} pending\n"
            f"Habits: {habits['done']}/{habits['total']} completed today\n"
            f"Budget: ${budget['spent']}/${budget['limit']} this week\n"
            f"Goals: {goals['on_track']}/{goals['total']} on track\n\n"
            "Format: Use bullet points (•) to list 2-3 key observations. "
            "Be specific and actionable. Keep it positive when possible.\n\n"
            "Your explanation (no extra text, just the bullet points):"
        )
        text = await AIService._complete(llm_router, prompt, cache_ttl=300)
        if text:
            return text

        insights = []
        if tasks["pending"] > 5:
            insights.append(f"{tasks['pending']} pending tasks need attention")
        if habits["done"] < habits["total"] / 2:
            insights.append("Habit completion below 50%")
        if budget["spent"] > budget["limit"] * 0.8:
            insights.append("Budget at 80%+ utilization")
        if goals["on_track"] >= goals["total"] / 2:
            insights.append(f"{goals['on_track']}/{goals['total']} goals on track")

        return f"• {' • '.join(insights)}" if insights else "Keep up the good work!"

    @staticmethod
    async def generate_weekly_synthesis(data: dict, llm_router) -> str:
        """
        data: {tasks, habits, time_entries, transactions, goals, journal_entries},
        each a list of API-shaped dicts from the last week.
        """
        tasks = data.get("tasks", [])
        habits = data.get("habits", [])
        goals = data.get("goals", [])
        journal = data.get("journal_entries", [])

        task_completed = sum(1 for t in tasks if t.get("status") == "completed")
        habits_done = sum(1 for h in habits if h.get("completed"))
        total_spent = sum(abs(t.get("amount", 0)) for t in data.get("transactions", []) if t.get("type") == "expense")
        total_minutes = sum(t.get("duration") or 0 for t in data.get("time_entries", []))
        active_goals = sum(1 for g in goals if g.get("status") == "active")
        avg_mood = (
            f"{sum(e.get('mood') or 5 for e in journal) / len(journal):.1f}" if journal else "N/A"
        )

        prompt = (
            "Generate a comprehensive weekly synthesis report (300-500 words) based on this user's data:\n\n"
            f"TASKS:\n- Completed: {task_completed}\n- Pending: {len(tasks) - task_completed}\n\n"
            f"HABITS:\n- Total check-ins: {len(habits)}\n\n"
            f"TIME DISTRIBUTION:\n- Total logged: {total_minutes} minutes\n\n"
            f"SPENDING:\n- Total: ${total_spent:.2f}\n\n"
            f"GOALS:\n- Active goals: {active_goals}\n\n"
            f"JOURNAL:\n- Entries: {len(journal)}\n- Average mood: {avg_mood}\n\n"
            "Format the report with:\n"
            "1. **Executive Summary**: 2-3 sentences on overall week\n"
            "2. **Key Wins**: 3-4 specific achievements\n"
            "3. **Patterns Detected**: 2-3 behavioral patterns noticed\n"
            "4. **Next Week Focus**: 2-3 recommendations\n\n"
            "Use markdown formatting. Be specific, insightful, and actionable."
        )
        text = await AIService._complete(llm_router, prompt)
        if text:
            return text

        return (
            "## Weekly Summary\n\n"
            "### Overview\n"
            f"This week you completed **{task_completed} tasks** and logged "
            f"**{round(total_minutes / 60)} hours** of focused work.\n\n"
            "### Key Highlights\n"
            f"- **Tasks:** {task_completed} completed out of {len(tasks)} total\n"
            f"- **Habits:** {habits_done} habits tracked\n"
            f"- **Spending:** ${total_spent:.2f} in expenses\n"
            f"- **Goals:** {active_goals} active goals\n\n"
            "### Recommendations\n"
            "1. Focus on completing remaining tasks\n"
            "2. Maintain habit consistency\n"
            "3. Review budget allocations\n\n"
            "*AI-powered insights available with an LLM provider configured.*"
        )

    @staticmethod
    async def generate_morning_briefing(data: dict, llm_router) -> str:
        """data: {pending_tasks, today_habits, upcoming_deadlines, yesterday_mood}"""
        pending = data.get("pending_tasks", [])
        habits = data.get("today_habits", [])
        deadlines = data.get("upcoming_deadlines", [])
        urgent = [t for t in pending if t.get("priority") in ("high", "urgent")]

        prompt = (
            "Generate a brief, motivational morning briefing (2-3 sentences) based on:\n"
            f"- {len(pending)} pending tasks ({len(urgent)} high priority)\n"
            f"- {len(habits)} habits to complete today\n"
            f"- {len(deadlines)} upcoming deadlines this week\n"
        )
        if data.get("yesterday_mood"):
            prompt += f"- Yesterday's mood: {data['yesterday_mood']}/10\n"
        prompt += '\nBe encouraging but actionable. Start with "Good morning!"'

        text = await AIService._complete(llm_router, prompt, cache_ttl=3600)
        if text:
            return text

        urgent_note = f" ({len(urgent)} urgent)" if urgent else ""
        return (
            f"Good morning! You have {len(pending)} tasks today{urgent_note}. "
            f"{len(habits)} habits to track. Let's make it a great day!"
        )

    @staticmethod
    async def ask(question: str, context: dict, llm_router) -> str:
        tasks = context.get("tasks") or []
        completed = sum(1 for t in tasks if t.get("status") == "completed")
        prompt = (
            f"You are an AI life coach assistant for {ASSISTANT_NAME}, a personal life management app.\n"
            f'The user has asked: "{question}"\n\n'
            "Here's their current data context:\n"
            f"- Tasks: {len(tasks)} total ({completed} completed)\n"
            f"- Habits: {len(context.get('habits') or [])} tracked\n"
            f"- Goals: {len(context.get('goals') or [])} active\n"
            f"- Recent mood trend: {context.get('avg_mood') or 'N/A'}/10\n\n"
            "Provide a helpful, actionable response based on their question. "
            "Keep it concise (2-4 sentences unless they ask for detail)."
        )
        text = await AIService._complete(llm_router, prompt)
        if text:
            return text
        return "AI assistant is currently unavailable. Please check your LLM API key configuration."

    @staticmethod
    async def summarize_journal(content: str, llm_router) -> str:
        """One or two sentence summary; falls back to the first sentence."""
        prompt = (
            "Summarize this journal entry in 1-2 sentences, in the second person, "
            "noting the overall mood. Return only the summary.\n\n" + content
        )
        text = await AIService._complete(llm_router, prompt)
        if text:
            return text
        first = re.split(r"(?<=[.!?])\s+", content.strip(), maxsplit=1)[0]
        return first[:280]

    @staticmethod
    def suggestions(hour: int) -> list[str]:
        """Time-of-day suggestions."""
        if 5 <= hour < 9:
            return [
                "Start with your most important task",
                "Complete morning habits",
                "Review today's schedule",
            ]
        if 9 <= hour < 12:
            return [
                "Focus on deep work - it's your peak productivity time",
                "Avoid checking email for the next hour",
            ]
        if 12 <= hour < 14:
            return [
                "Take a proper lunch break",
                "Log your morning accomplishments",
            ]
        if 14 <= hour < 17:
            return [
                "Schedule meetings and collaborative work",
                "Review progress on urgent tasks",
            ]
        if 17 <= hour < 20:
            return [
                "Wind down work tasks",
                "Complete evening habits",
                "Plan tomorrow's priorities",
            ]
        return [
            "Reflect on today's wins",
            "Write a journal entry",
            "Prepare for restful sleep",
        ]

    @staticmethod
    def most_common(values: list) -> str:
        counts = Counter(v for v in values if v)
        if not counts:
            return "N/A"
        return str(counts.most_common(1)[0][0])
