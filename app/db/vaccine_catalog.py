"""National childhood immunization schedule (India, 2025).

Seed data for the vaccination_schedule table. Each entry sets at most one
of age_weeks / age_months / age_years; an entry with none is given at birth.
sort_order defines display order and must be unique.
"""

from typing import NamedTuple


class CatalogSeed(NamedTuple):
    vaccine_name: str
    vaccine_code: str
    purpose: str
    age_weeks: int | None = None
    age_months: int | None = None
    age_years: int | None = None
    is_optional: bool = False


_SEEDS: list[CatalogSeed] = [
    # At birth
    CatalogSeed("BCG", "BCG", "Protects against tuberculosis"),
    CatalogSeed("OPV-0 (Oral Polio Vaccine)", "OPV0", "Protects against polio"),
    CatalogSeed("Hepatitis B - Birth dose", "HEPB0", "Protects against hepatitis B"),
    # 6 weeks
    CatalogSeed(
        "Pentavalent-1",
        "PENTA1",
        "Protects against diphtheria, pertussis, tetanus, hepatitis B and Hib",
        age_weeks=6,
    ),
    CatalogSeed("OPV-1", "OPV1", "Protects against polio", age_weeks=6),
    CatalogSeed("Rotavirus-1", "RVV1", "Protects against rotavirus diarrhoea", age_weeks=6),
    CatalogSeed("fIPV-1 (Fractional Inactivated Polio Vaccine)", "FIPV1", "Protects against polio", age_weeks=6),
    CatalogSeed("PCV-1 (Pneumococcal Conjugate Vaccine)", "PCV1", "Protects against pneumonia and meningitis", age_weeks=6),
    # 10 weeks
    CatalogSeed(
        "Pentavalent-2",
        "PENTA2",
        "Protects against diphtheria, pertussis, tetanus, hepatitis B and Hib",
        age_weeks=10,
    ),
    CatalogSeed("OPV-2", "OPV2", "Protects against polio", age_weeks=10),
    CatalogSeed("Rotavirus-2", "RVV2", "Protects against rotavirus diarrhoea", age_weeks=10),
    # 14 weeks
    CatalogSeed(
        "Pentavalent-3",
        "PENTA3",
        "Protects against diphtheria, pertussis, tetanus, hepatitis B and Hib",
        age_weeks=14,
    ),
    CatalogSeed("OPV-3", "OPV3", "Protects against polio", age_weeks=14),
    CatalogSeed("Rotavirus-3", "RVV3", "Protects against rotavirus diarrhoea", age_weeks=14),
    CatalogSeed("fIPV-2", "FIPV2", "Protects against polio", age_weeks=14),
    CatalogSeed("PCV-2", "PCV2", "Protects against pneumonia and meningitis", age_weeks=14),
    # 9 months
    CatalogSeed("MR-1 (Measles-Rubella)", "MR1", "Protects against measles and rubella", age_months=9),
    CatalogSeed("fIPV-3", "FIPV3", "Protects against polio", age_months=9),
    CatalogSeed("PCV Booster", "PCVB", "Protects against pneumonia and meningitis", age_months=9),
    CatalogSeed(
        "JE-1 (Japanese Encephalitis)",
        "JE1",
        "Protects against Japanese encephalitis (endemic districts)",
        age_months=9,
        is_optional=True,
    ),
    CatalogSeed(
        "Typhoid Conjugate Vaccine",
        "TCV",
        "Protects against typhoid fever",
        age_months=9,
        is_optional=True,
    ),
    # 12-15 months
    CatalogSeed("Hepatitis A", "HEPA", "Protects against hepatitis A", age_months=12, is_optional=True),
    CatalogSeed("Varicella", "VAR", "Protects against chickenpox", age_months=15, is_optional=True),
    # 16 months
    CatalogSeed("MR-2", "MR2", "Protects against measles and rubella", age_months=16),
    CatalogSeed("DPT Booster-1", "DPTB1", "Protects against diphtheria, pertussis and tetanus", age_months=16),
    CatalogSeed("OPV Booster", "OPVB", "Protects against polio", age_months=16),
    CatalogSeed(
        "JE-2",
        "JE2",
        "Protects against Japanese encephalitis (endemic districts)",
        age_months=16,
        is_optional=True,
    ),
    # 5 years and above
    CatalogSeed("DPT Booster-2", "DPTB2", "Protects against diphtheria, pertussis and tetanus", age_years=5),
    CatalogSeed("HPV", "HPV", "Protects against human papillomavirus", age_years=9, is_optional=True),
    CatalogSeed("Td-1 (Tetanus and adult Diphtheria)", "TD10", "Protects against tetanus and diphtheria", age_years=10),
    CatalogSeed("Td-2", "TD16", "Protects against tetanus and diphtheria", age_years=16),
]


def catalog_rows() -> list[dict]:
    """Return seed rows with 1-based sort_order, in display order."""
    return [
        {**seed._asdict(), "sort_order": index}
        for index, seed in enumerate(_SEEDS, start=1)
    ]
