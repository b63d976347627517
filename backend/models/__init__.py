from models.study import Vocab, VocabStudy, Learner

__all__ = [
    "Vocab", "VocabStudy", "Learner",
]
