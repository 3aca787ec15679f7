"""
mathcoach/knowledge/stats.py
Per-topic attempt counters derived from the history log.
"""
from typing import Dict, Iterable, List, Optional

from mathcoach.knowledge.models import ProblemRecord, TopicStat, UserStats


def aggregate(log: Iterable[ProblemRecord], limit: Optional[int] = None) -> UserStats:
    """
    Count attempts and correct answers per topic. Topics keep first-seen order
    so the frequency ranking breaks ties the way the log reads. All topics are
    ranked unless limit is given.
    """
    counts: Dict[str, List[int]] = {}
    for record in log:
        pair = counts.setdefault(record.topic, [0, 0])
        pair[0] += 1
        if record.is_correct:
            pair[1] += 1

    topics = {
        t: TopicStat(topic=t, total_attempts=total, correct_attempts=correct)
        for t, (total, correct) in counts.items()
    }
    total = sum(s.total_attempts for s in topics.values())
    correct = sum(s.correct_attempts for s in topics.values())
    ranked = sorted(topics.values(), key=lambda s: s.total_attempts, reverse=True)

    return UserStats(
        total_attempts=total,
        correct_attempts=correct,
        overall_correct_rate=round(correct / total * 100, 1) if total else 0.0,
        topics=topics,
        most_frequent_topics=[s.topic for s in (ranked if limit is None else ranked[:max(limit, 0)])],
    )
