#!/usr/bin/env python3
"""Seed a learner and a starter vocabulary from a YAML file.

The file holds a learner block and a list of vocabulary entries:

    learner:
      name: Ana
      code: secret
    vocab:
      - learning: comprendimos
        first: we understood
        alternatives: entendemos
        pos: verb

Every entry is assigned to the learner with a fresh study record.

Run with: python3 -m scripts.seed_vocab [path/to/file.yaml]
"""
import argparse
import asyncio
from pathlib import Path

import yaml
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from core.database import get_db_session, engine, Base
from models.study import Learner, Vocab, VocabStudy


DEFAULT_FILE = Path(__file__).parent.parent.parent / "data" / "vocab" / "es_starter.yaml"


def load_yaml(path: Path) -> dict:
    if not path.exists():
        return {}
    with open(path) as f:
        return yaml.safe_load(f) or {}


async def seed(session: AsyncSession, data: dict) -> Learner:
    """Create the learner (or reuse one with the same name) and assign the vocab."""
    learner_def = data.get("learner") or {}
    name = learner_def.get("name", "")

    result = await session.execute(select(Learner).where(Learner.name == name))
    learner = result.scalars().first()
    if learner is None:
        learner = Learner(name=name, code=learner_def.get("code", ""))
        session.add(learner)
        await session.flush()

    result = await session.execute(select(Vocab))
    existing = {v.learning_lang: v for v in result.scalars().all()}

    created = 0
    for entry in data.get("vocab") or []:
        learning = (entry.get("learning") or "").strip()
        if not learning:
            continue

        vocab = existing.get(learning)
        if vocab is None:
            vocab = Vocab(
                learning_lang=learning,
                first_lang=entry.get("first", ""),
                alternatives=entry.get("alternatives"),
                hint=entry.get("hint"),
                pos=entry.get("pos"),
                skill=entry.get("skill"),
                infinitive=entry.get("infinitive"),
            )
            session.add(vocab)
            await session.flush()
            existing[learning] = vocab
            created += 1

        result = await session.execute(
            select(VocabStudy).where(
                VocabStudy.vocab_id == vocab.id,
                VocabStudy.learner_id == learner.id,
            )
        )
        if result.scalar_one_or_none() is None:
            session.add(VocabStudy(
                vocab_id=vocab.id,
                learner_id=learner.id,
                user_notes=entry.get("notes", ""),
            ))

    await session.commit()
    print(f"Seeded {created} new vocab entries for learner {learner.id} ({learner.name})")
    return learner


async def main(path: Path):
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    data = load_yaml(path)
    if not data:
        print(f"No vocabulary found at: {path}")
        return

    async with get_db_session() as session:
        await seed(session, data)

    await engine.dispose()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Seed starter vocabulary")
    parser.add_argument("path", nargs="?", type=Path, default=DEFAULT_FILE)
    args = parser.parse_args()
    asyncio.run(main(args.path))
