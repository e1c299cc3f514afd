#!/usr/bin/env python3
"""
Sage Client Usage Examples

This script walks through the journal-facing features:
- One sage's insight on a piece of writing
- All four sages at once, with each fan-out policy
- A summary that weaves the sages' words together
- Personalised writing topics
- A structured analysis of journal history

Needs OPENROUTER_API_KEY in the environment (or config/awaken.yaml).
"""

import asyncio
from datetime import datetime, timedelta

from awaken import (
    AwakenException,
    FanOutPolicy,
    InsightType,
    JournalExcerpt,
    SageClient,
    configure_logging,
    load_config,
)


ENTRY = "今天在公园散步，看到一个老人在喂鸽子，突然觉得安静本身就是一种礼物。"


# Example 1: A single sage
async def single_insight_example(client: SageClient):
    print("\n=== Single Insight Example ===")

    insight = await client.get_insight(ENTRY, "laozi", "gratitude")
    print(f"{insight.emoji} {insight.display_name}: {insight.text}")


# Example 2: Every sage, three ways
async def fan_out_example(client: SageClient):
    print("\n=== Fan-out Example ===")

    for policy in FanOutPolicy:
        insights = await client.get_all_insights(ENTRY, "philosophical", policy=policy)
        print(f"\n--- {policy.value}: {len(insights)} insights ---")
        for insight in insights:
            marker = " (placeholder)" if insight.is_placeholder else ""
            print(f"{insight.emoji} {insight.display_name}{marker}: {insight.text[:60]}")


# Example 3: Blessings and a summary
async def summary_example(client: SageClient):
    print("\n=== Blessing & Summary Example ===")

    blessings = await client.get_blessings(ENTRY)
    summary = await client.get_summary(ENTRY, blessings)
    print(f"Summary: {summary}")


# Example 4: Topics and analysis from history
async def history_example(client: SageClient):
    print("\n=== History Example ===")

    today = datetime.now()
    history = [
        JournalExcerpt(content="谢谢妈妈早上做的粥。", created_at=today - timedelta(days=2)),
        JournalExcerpt(content="和同事一起解决了一个难题，很有成就感。", created_at=today - timedelta(days=1)),
        JournalExcerpt(content=ENTRY, created_at=today),
    ]

    topics = await client.get_dynamic_topics(history)
    for topic in topics:
        print(f"{topic.icon} {topic.text}")

    try:
        result = await client.analyze_history(history, InsightType.RELATIONSHIPS)
        print(f"\n{result.theorist.avatar} {result.theorist.name}")
        print(result.model_dump_json(by_alias=True, indent=2))
    except AwakenException as e:
        print(f"Analysis error: {e}")


async def main():
    config = load_config()
    configure_logging(config.log_level)

    async with SageClient(config) as client:
        await single_insight_example(client)
        await fan_out_example(client)
        await summary_example(client)
        await history_example(client)


if __name__ == "__main__":
    asyncio.run(main())
