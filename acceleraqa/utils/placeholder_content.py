"""
Demo text for empty uploads.

Only used when PLACEHOLDER_ON_EMPTY_UPLOAD is switched on; the topic is picked
from a hash of the filename so the same filename always yields the same text.
"""
import hashlib
from typing import Dict, List

TOPICS: List[Dict[str, str]] = [
    {
        "title": "Good Manufacturing Practice (GMP)",
        "content": (
            "Good Manufacturing Practice (GMP) regulations ensure pharmaceutical products are consistently "
            "produced and controlled according to quality standards. GMP covers all aspects of production from "
            "raw materials to finished products. Key principles include quality management systems, controlled "
            "manufacturing processes, validated critical steps, proper facility design, qualified personnel, "
            "contamination control, quality control systems, and comprehensive documentation. Regular audits "
            "and inspections verify GMP compliance."
        ),
    },
    {
        "title": "Process Validation",
        "content": (
            "Process validation demonstrates that a manufacturing process consistently produces products meeting "
            "predetermined specifications and quality attributes. The validation lifecycle includes process "
            "design, process qualification, and continued process verification. Stage 1 involves process design "
            "and development. Stage 2 includes installation qualification (IQ), operational qualification (OQ), "
            "and performance qualification (PQ). Stage 3 requires ongoing commercial manufacturing monitoring to "
            "ensure the process remains in a state of control."
        ),
    },
    {
        "title": "CAPA System Implementation",
        "content": (
            "Corrective and Preventive Action (CAPA) systems identify, investigate, and correct quality problems "
            "while preventing recurrence. CAPA processes include problem identification, investigation and root "
            "cause analysis, corrective action implementation, preventive action development, and effectiveness "
            "verification. Documentation requirements include CAPA records, investigation reports, and trending "
            "analysis. Regular CAPA system effectiveness reviews ensure continuous improvement."
        ),
    },
    {
        "title": "Quality Risk Management",
        "content": (
            "Quality Risk Management (QRM) per ICH Q9 provides a systematic approach to assessing, controlling, "
            "communicating, and reviewing risks to quality throughout the product lifecycle. Risk management "
            "tools include failure mode and effects analysis (FMEA), fault tree analysis (FTA), hazard analysis "
            "and critical control points (HACCP), and preliminary hazard analysis (PHA). Risk assessment "
            "considers severity, occurrence probability, and detectability."
        ),
    },
    {
        "title": "Computer System Validation",
        "content": (
            "Computer System Validation (CSV) ensures that computerized systems consistently fulfill their "
            "intended use and comply with regulatory requirements. CSV approaches include GAMP 5 categories, "
            "risk-based validation, and agile validation methods. Validation activities encompass user "
            "requirements specification, functional specification, design specification, installation "
            "qualification, operational qualification, and performance qualification. Electronic records and "
            "signatures must comply with 21 CFR Part 11."
        ),
    },
]

TEMPLATE = """Pharmaceutical Document: {filename}

Subject: {title}

{content}

Regulatory Framework:
This document aligns with FDA regulations, ICH guidelines, and current good manufacturing practice requirements. Key regulatory references include 21 CFR Parts 210 and 211, ICH Q7 through Q12, and relevant FDA guidance documents.

Implementation Considerations:
- Establish clear procedures and responsibilities
- Provide adequate training for personnel
- Maintain comprehensive documentation
- Conduct regular reviews and updates
- Ensure effective change control processes

Quality Assurance Requirements:
All activities must be conducted in accordance with established quality systems, with proper documentation, review, and approval processes. Regular audits and assessments verify compliance with regulatory requirements and internal standards."""


def topic_for(filename: str) -> Dict[str, str]:
    digest = hashlib.sha256(filename.encode("utf-8")).digest()
    return TOPICS[int.from_bytes(digest[:4], "big") % len(TOPICS)]


def generate_placeholder_content(filename: str) -> str:
    topic = topic_for(filename)
    return TEMPLATE.format(filename=filename, title=topic["title"], content=topic["content"])
