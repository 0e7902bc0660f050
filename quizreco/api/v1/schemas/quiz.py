# api/v1/schemas/quiz.py
from typing import Dict, List, Optional, Tuple
from pydantic import BaseModel, Field

from quizreco.domain.models.product import UserProfile

# Answer fragments (lowercased substring) -> profile tags, first match wins
SKIN_TYPES: Tuple[Tuple[str, str], ...] = (
    ("oleos", "oily"),
    ("seca", "dry"),
    ("mista", "combination"),
    ("normal", "normal"),
)
HAIR_TYPES: Tuple[Tuple[str, str], ...] = (
    ("oleos", "oily"),
    ("sec", "dry"),
    ("cache", "curly"),
    ("crespo", "curly"),
    ("color", "colored"),
    ("loir", "colored"),
)
CONCERNS: Dict[str, Tuple[Tuple[str, str], ...]] = {
    "face": (
        ("acne", "acne"),
        ("manchas", "spots"),
        ("poros", "pores"),
        ("ressec", "dryness"),
        ("oleos", "oiliness"),
    ),
    "hair": (
        ("frizz", "frizz"),
        ("caspa", "dandruff"),
        ("queda", "hair_loss"),
        ("danific", "damage"),
        ("quebra", "damage"),
    ),
}


def _match(text: str, table: Tuple[Tuple[str, str], ...]) -> Optional[str]:
    return next((tag for frag, tag in table if frag in text), None)


class QuizAnswers(BaseModel):
    pele: str = ""
    cabelo: str = ""
    sensibilidade: str = ""
    inc: List[str] = Field(default_factory=list)
    orcamento: str = ""
    familia: Optional[str] = None

    def to_profile(self, default_family: str = "face") -> UserProfile:
        family = (self.familia or default_family).strip().lower()
        pele = self.pele.lower()
        inc_txt = " ".join(self.inc).lower()

        if family == "hair":
            type_tag = _match(self.cabelo.lower(), HAIR_TYPES)
        else:
            type_tag = _match(pele, SKIN_TYPES)

        concerns = frozenset(
            tag for frag, tag in CONCERNS.get(family, ()) if frag in inc_txt
        )
        return UserProfile(
            family=family,
            skin_type=type_tag,
            sensitive="sens" in pele or "sim" in self.sensibilidade.lower(),
            concerns=concerns,
            budget=self.orcamento,
        )


class GenerateProductsIn(BaseModel):
    answers: Optional[QuizAnswers] = None
