"""
Disclaimer Injection

Mandatory disclaimers attached to every medicine analysis.
"""

from typing import Optional


MEDICAL_DISCLAIMER = {
    "en": """
⚠️ IMPORTANT DISCLAIMER

This analysis is generated by an AI model from a photo of the package. It is an aid, not a certified diagnostic tool, and it may be incomplete or wrong.

• Always consult your doctor or pharmacist before taking any medication.
• Do not start, change, or discontinue any medication based on this analysis.
• Ratings, prices and patient stories are model estimates, not verified data.
• If you are experiencing a medical emergency, seek immediate medical attention.
""".strip(),

    "tr": """
⚠️ ÖNEMLİ UYARI

Bu analiz, ambalaj fotoğrafından bir yapay zeka modeli tarafından üretilmiştir. Yalnızca yardımcı bir araçtır; eksik veya hatalı olabilir.

• Herhangi bir ilaç kullanmadan önce mutlaka doktorunuza veya eczacınıza danışınız.
• Bu analize dayanarak ilaç tedavisini başlatmayın, değiştirmeyin veya sonlandırmayın.
• Puanlar, fiyatlar ve hasta deneyimleri model tahminleridir, doğrulanmış veri değildir.
• Acil bir sağlık sorunu yaşıyorsanız derhal tıbbi yardım alınız.
""".strip(),
}


SHORT_DISCLAIMER = {
    "en": "⚠️ AI-generated analysis. Consult a doctor or pharmacist before use.",
    "tr": "⚠️ Yapay zeka analizidir. Kullanmadan önce doktorunuza danışınız.",
}


class DisclaimerInjector:
    """
    Supplies the medical disclaimer shown with every analysis.
    """

    def __init__(self, language: str = "en"):
        """
        Initialize disclaimer injector.

        Args:
            language: Disclaimer language code
        """
        self.language = language

    def get_full_disclaimer(self, language: Optional[str] = None) -> str:
        lang = language or self.language
        return MEDICAL_DISCLAIMER.get(lang, MEDICAL_DISCLAIMER["en"])

    def get_short_disclaimer(self, language: Optional[str] = None) -> str:
        lang = language or self.language
        return SHORT_DISCLAIMER.get(lang, SHORT_DISCLAIMER["en"])

    def inject_disclaimer(self, text: str, language: Optional[str] = None) -> str:
        """
        Append the full disclaimer to a rendered analysis.

        Args:
            text: Rendered analysis text
            language: Override language

        Returns:
            Text followed by the disclaimer
        """
        return f"{text}\n\n---\n\n{self.get_full_disclaimer(language)}"
