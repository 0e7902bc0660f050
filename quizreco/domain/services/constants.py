# Constants for the quiz recommendation pipeline.
from quizreco.domain.models.config import BudgetBand, KeywordRule, ProductFamily, Slot

# Candidates accumulated per slot before the remaining (broader) queries are skipped
SLOT_SUFFICIENCY = 60

# Product families
FAMILY_FACE = "face"
FAMILY_HAIR = "hair"

# Budget policies
POLICY_ESCALATE = "escalate"
POLICY_HARD_CEILING = "hard_ceiling"

# Exhaustion policies
EXHAUSTION_FILLER = "filler"
EXHAUSTION_ERROR = "error"

# Price ladder (BRL). Each min starts one cent above the previous max so every
# two-decimal price falls in exactly one band.
BUDGET_LADDER = (
    BudgetBand(label="Até R$ 60", min=0, max=60),
    BudgetBand(label="R$ 61 - R$ 90", min=60.01, max=90),
    BudgetBand(label="R$ 91 - R$ 120", min=90.01, max=120),
    BudgetBand(label="R$ 121 - R$ 150", min=120.01, max=150),
    BudgetBand(label="R$ 151 - R$ 200", min=150.01, max=200),
    BudgetBand(label="R$ 201 - R$ 250", min=200.01, max=250),
    BudgetBand(label="R$ 251 - R$ 350", min=250.01, max=350),
    BudgetBand(label="R$ 351+", min=350.01, max=9999),
)

ESCALATION_MESSAGE = (
    "Não encontramos produtos suficientes na faixa de preço indicada ({requested}). "
    "Por isso, exibimos produtos na próxima faixa ({used})."
)
UNHONORED_MESSAGE = (
    "Não encontramos produtos suficientes na faixa de preço indicada ({requested}). "
    "Por isso, exibimos os produtos mais adequados ao seu perfil, independentemente do preço."
)

# Age-restricted content; the quiz audience is adults
FORBIDDEN_TERMS = (
    "infantil", "infantis", "baby", "bebê", "bebe", "crianca", "criança", "kids",
    "menino", "menina", "pediátric", "pediatric", "júnior", "junior",
)

# Rakuten affiliate tracking
AFFILIATE_PARAMS = {
    "utm_source": "rakuten",
    "utm_medium": "afiliados",
    "utm_term": "4587713",
    "ranMID": "47714",
    "ranEAID": "OyPY4YHfHl4",
    "ranSiteID": "OyPY4YHfHl4-5t9np1DoTPuG6fO28twrDA",
}

_PEXELS = "https://images.pexels.com/photos/{id}/pexels-photo-{id}.jpeg?auto=compress&cs=tinysrgb&w=800"

FACE_FALLBACK_IMGS = tuple(_PEXELS.format(id=i) for i in (3762879, 6621457, 3738349, 7755641, 3756450))
HAIR_FALLBACK_IMGS = tuple(_PEXELS.format(id=i) for i in (3993449, 3993398, 7755259))

FACE_FAMILY = ProductFamily(
    name=FAMILY_FACE,
    label="rotina facial",
    slots=(
        Slot(key="cleanser", keyword="limpador", preferred=("cleanser",),
             fallback_image=FACE_FALLBACK_IMGS[0], category_page="/rosto/limpeza"),
        Slot(key="moisturizer", keyword="hidratante", preferred=("moisturizer",),
             fallback_image=FACE_FALLBACK_IMGS[1], category_page="/rosto/hidratantes"),
        Slot(key="sunscreen", keyword="protetor solar", preferred=("sunscreen",),
             fallback_image=FACE_FALLBACK_IMGS[2], category_page="/rosto/protetor-solar"),
        Slot(key="treatment", keyword="serum", preferred=("serum", "toner"),
             fallback_image=FACE_FALLBACK_IMGS[3], category_page="/rosto/tratamento"),
        Slot(key="exfoliant", keyword="esfoliante", preferred=("exfoliant",),
             fallback_image=FACE_FALLBACK_IMGS[4], category_page="/rosto/esfoliantes"),
    ),
    category_rules=(
        KeywordRule(category="sunscreen", keywords=("protetor solar", "fps", "sunscreen", "solar")),
        KeywordRule(category="cleanser", keywords=(
            "limpador", "limpeza", "sabonete", "gel de limpeza", "espuma", "agua micelar", "água micelar")),
        KeywordRule(category="moisturizer", keywords=("hidratante", "hidratação", "hidratacao", "moisturizer")),
        KeywordRule(category="exfoliant", keywords=("esfoliante", "esfoliação", "esfoliacao", "peeling", "scrub")),
        KeywordRule(category="serum", keywords=("sérum", "serum", "vitamina c", "niacin", "hialuron")),
        KeywordRule(category="toner", keywords=("tônico", "tonico")),
    ),
    family_keywords=(
        "limpador", "limpeza", "cleanser", "sabonete", "gel de limpeza", "espuma", "água micelar", "agua micelar",
        "hidratante", "hidratação", "hidratacao", "moisturizer", "creme", "gel creme",
        "esfoliante", "esfoliação", "esfoliacao", "scrub", "peeling",
        "protetor", "protetor solar", "fps", "sunscreen", "solar",
        "sérum", "serum", "vitamina c", "niacinamida", "ácido", "acido", "hialurônico", "hialuronico",
        "tônico", "tonico", "máscara", "mascara", "face", "facial",
    ),
    query_suffixes=("facial", "face"),
    treatment_prefix="tratamento facial",
    category_page="/rosto",
    type_terms={"oily": "pele oleosa", "dry": "pele seca", "combination": "pele mista"},
    sensitive_term="pele sensível",
    concern_terms={
        "acne": "acne",
        "spots": "manchas",
        "pores": "poros",
        "dryness": "hidratacao",
        "oiliness": "controle oleosidade",
    },
    type_keywords={
        "oily": ("oil", "oleos", "controle"),
        "dry": ("hidrat", "hialur", "nutri"),
        "combination": ("mista", "equilibr"),
    },
    sensitive_keywords=("sens", "suave", "calm"),
    concern_keywords={
        "acne": ("acne", "salic"),
        "spots": ("vitamina c", "niacin", "clare"),
        "pores": ("poro", "matte"),
        "dryness": ("hidrat", "hialur"),
        "oiliness": ("oil", "oleos", "matte"),
    },
    benefit_rules=(
        (("fps", "solar"), "Proteção diária para a pele"),
        (("hidrat", "hialur"), "Hidratação e conforto"),
        (("vitamina c", "niacin"), "Ajuda a uniformizar o tom"),
        (("acne", "salic"), "Ajuda no controle de acne/oleosidade"),
        (("sens", "suave"), "Mais gentil para pele sensível"),
    ),
    generic_benefit="Combina com seu perfil e rotina facial",
    reason=(
        "Selecionado para montar uma rotina facial completa (limpeza, hidratação, "
        "proteção e tratamento), respeitando seu perfil."
    ),
    fallback_images=FACE_FALLBACK_IMGS,
)

HAIR_FAMILY = ProductFamily(
    name=FAMILY_HAIR,
    label="rotina capilar",
    slots=(
        Slot(key="shampoo", keyword="shampoo", preferred=("shampoo",),
             fallback_image=HAIR_FALLBACK_IMGS[0], category_page="/cabelos/shampoo"),
        Slot(key="conditioner", keyword="condicionador", preferred=("conditioner",),
             fallback_image=HAIR_FALLBACK_IMGS[1], category_page="/cabelos/condicionador"),
        Slot(key="treatment", keyword="máscara capilar", preferred=("mask", "leave_in", "oil"),
             fallback_image=HAIR_FALLBACK_IMGS[2], category_page="/cabelos/tratamento"),
    ),
    category_rules=(
        KeywordRule(category="shampoo", keywords=("shampoo", "xampu")),
        KeywordRule(category="conditioner", keywords=("condicionador", "conditioner")),
        KeywordRule(category="mask", keywords=("máscara", "mascara", "mask", "hair mask")),
        KeywordRule(category="leave_in", keywords=("leave-in", "leave in", "creme de pentear")),
        KeywordRule(category="oil", keywords=("óleo", "oleo", "oil")),
    ),
    family_keywords=(
        "shampoo", "xampu", "condicionador", "conditioner", "máscara", "mascara", "leave-in", "leave in",
        "creme de pentear", "óleo", "oleo", "capilar", "cabelo", "cabelos", "hair",
    ),
    query_suffixes=("capilar", "cabelo"),
    treatment_prefix="tratamento capilar",
    category_page="/cabelos",
    type_terms={
        "oily": "cabelo oleoso",
        "dry": "cabelo seco",
        "curly": "cabelo cacheado",
        "colored": "cabelo colorido",
    },
    sensitive_term="couro cabeludo sensível",
    concern_terms={
        "frizz": "antifrizz",
        "dandruff": "anticaspa",
        "hair_loss": "antiqueda",
        "damage": "reconstrução",
    },
    type_keywords={
        "oily": ("oleos", "detox", "purific"),
        "dry": ("hidrat", "nutri", "umect"),
        "curly": ("cach", "curl"),
        "colored": ("color", "matiz", "loiro"),
    },
    sensitive_keywords=("sens", "suave", "calm"),
    concern_keywords={
        "frizz": ("frizz", "liso"),
        "dandruff": ("caspa", "anticaspa"),
        "hair_loss": ("queda", "fortalec"),
        "damage": ("reconstr", "repara", "queratina"),
    },
    benefit_rules=(
        (("hidrat", "nutri"), "Hidratação e nutrição dos fios"),
        (("reconstr", "repara", "queratina"), "Ajuda a reparar fios danificados"),
        (("frizz",), "Controle do frizz"),
        (("caspa",), "Ajuda no controle da caspa"),
        (("queda", "fortalec"), "Fortalece os fios"),
    ),
    generic_benefit="Combina com seu perfil e rotina capilar",
    reason="Selecionado para montar uma rotina capilar completa (limpeza, condicionamento e tratamento), respeitando seu perfil.",
    fallback_images=HAIR_FALLBACK_IMGS,
)

FAMILIES = {FACE_FAMILY.name: FACE_FAMILY, HAIR_FAMILY.name: HAIR_FAMILY}
