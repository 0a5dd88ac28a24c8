"""Bilingual concept table used to give English and Chinese notes some overlap."""
from __future__ import annotations

CONCEPTS: dict[str, tuple[str, ...]] = {
    "time": ("时间", "时", "日期"),
    "day": ("天", "日", "日子"),
    "person": ("人", "人员", "个人"),
    "work": ("工作", "职业", "任务"),
    "book": ("书", "书籍"),
    "food": ("食物", "食品", "餐"),
    "water": ("水", "水分"),
    "house": ("房子", "家", "住宅"),
    "computer": ("电脑", "计算机"),
    "friend": ("朋友", "伙伴"),
    "family": ("家庭", "家人"),
    "money": ("钱", "金钱", "资金"),
    "school": ("学校", "校园"),
    "business": ("商业", "生意", "企业"),
    "city": ("城市", "市"),
    "country": ("国家", "国"),
    "world": ("世界", "全球"),
    "health": ("健康", "保健"),
    "history": ("历史", "史"),
    "future": ("未来", "将来"),
    "technology": ("技术", "科技"),
    "science": ("科学", "学科"),
    "art": ("艺术", "美术"),
    "music": ("音乐", "曲"),
    "film": ("电影", "影片"),
    "love": ("爱", "爱情"),
    "problem": ("问题", "难题"),
    "solution": ("解决方案", "解决", "方案"),
    "idea": ("想法", "主意", "概念"),
    "information": ("信息", "资讯"),
}


def _invert(concepts: dict[str, tuple[str, ...]]) -> dict[str, tuple[str, ...]]:
    inverted: dict[str, list[str]] = {}
    for english, equivalents in concepts.items():
        for term in equivalents:
            inverted.setdefault(term, []).append(english)
    return {term: tuple(englishes) for term, englishes in inverted.items()}


# Chinese term -> English concepts, in table order.
REVERSE_CONCEPTS: dict[str, tuple[str, ...]] = _invert(CONCEPTS)


__all__ = ["CONCEPTS", "REVERSE_CONCEPTS"]
