"""
Prospecting Script Generator for LeadMaps.

Builds channel-specific B2B outreach scripts from a qualified lead's
digital gaps and reputation.
"""

import logging
from typing import Callable, Dict, List, Optional, Sequence

from .models import Channel, ProspectingScript, QualifiedLead, RecommendedApproach

logger = logging.getLogger(__name__)


def format_rating(rating: Optional[float]) -> str:
    """4.8 -> "4.8", 5.0 -> "5"."""
    if rating is None:
        return ""
    return f"{rating:g}"


class ScriptGenerator:
    """
    Generates prospecting scripts for chat (WhatsApp), cold call and email.

    Pain points and value propositions come from a fixed rule list keyed
    on missing channels, low rating and few reviews.
    """

    HIGH_RATING = 4.5
    LOW_RATING = 4.0
    FEW_REVIEWS = 20

    DEFAULT_PAIN_POINT = "oportunidades de crescimento digital"

    CTAS = {
        Channel.CHAT: "Tem 5 minutos para conversarmos?",
        Channel.CALL: "Que tal amanhã às 14h ou quinta às 10h?",
        Channel.EMAIL: "Responda este email ou me chame no WhatsApp",
    }

    def __init__(self):
        self._builders: Dict[Channel, Callable[[QualifiedLead, List[str]], str]] = {
            Channel.CHAT: self._chat_script,
            Channel.CALL: self._call_script,
            Channel.EMAIL: self._email_script,
        }

    # ── Analysis ───────────────────────────────────────

    def identify_pain_points(self, qualified: QualifiedLead) -> List[str]:
        lead = qualified.lead
        pain_points = []

        if not lead.has_website:
            pain_points.append("Ausência de site próprio limita vendas diretas")
            pain_points.append("Dependência de plataformas de terceiros (iFood, Rappi, etc.)")

        if not lead.has_whatsapp:
            pain_points.append("Sem WhatsApp Business para atendimento rápido")
            pain_points.append("Perda de clientes que preferem contato via WhatsApp")

        if not lead.has_instagram:
            pain_points.append("Ausência no Instagram reduz visibilidade")
            pain_points.append("Falta de engajamento com público jovem")

        if lead.rating and lead.rating < self.LOW_RATING:
            pain_points.append("Avaliação abaixo da média pode afastar clientes")

        if lead.reviews and lead.reviews < self.FEW_REVIEWS:
            pain_points.append("Poucas avaliações reduzem confiança do público")

        return pain_points

    def value_proposition(self, qualified: QualifiedLead) -> str:
        lead = qualified.lead
        propositions = []

        if not lead.has_website:
            propositions.append("site profissional com sistema de pedidos integrado")

        if not lead.has_whatsapp:
            propositions.append("automação de WhatsApp para atendimento 24/7")

        if not lead.has_instagram:
            propositions.append("gestão de redes sociais com conteúdo estratégico")

        if self._has_good_rating(qualified):
            propositions.append("potencializar sua excelente reputação online")

        return ", ".join(propositions)

    def personalization_factors(self, qualified: QualifiedLead) -> List[str]:
        lead = qualified.lead
        factors = [
            f"Nome: {lead.name}",
            f"Categoria: {lead.category}",
            f"Rating: {format_rating(lead.rating)} ⭐" if lead.rating else "",
            f"Reviews: {lead.reviews}" if lead.reviews else "",
            f"Temperatura: {qualified.temperature.label}",
            f"Score: {qualified.score}/100",
        ]
        return [factor for factor in factors if factor]

    def _has_good_rating(self, qualified: QualifiedLead) -> bool:
        rating = qualified.lead.rating
        return rating is not None and rating >= self.HIGH_RATING

    @staticmethod
    def _category_plural(qualified: QualifiedLead) -> str:
        return f"{qualified.lead.category.lower()}s"

    # ── Channel templates ──────────────────────────────

    def _chat_script(self, qualified: QualifiedLead, pain_points: List[str]) -> str:
        lead = qualified.lead
        main_pain_point = pain_points[0] if pain_points else self.DEFAULT_PAIN_POINT

        if self._has_good_rating(qualified):
            opening = f"Vi que {lead.name} possui avaliação {format_rating(lead.rating)} ⭐ no Google"
        else:
            opening = f"Encontrei {lead.name} no Google"

        if not lead.has_website:
            gap = (
                "mas não encontrei um site para pedidos diretos — isso faz muitos clientes "
                "acabarem pedindo pelo iFood, que cobra taxas altas."
            )
        else:
            gap = "e identifiquei oportunidades para aumentar suas vendas online."

        return f"""Olá! Tudo bem?

{opening}, {gap}

Um ponto que chamou atenção: {main_pain_point.lower()}.

Trabalho com soluções digitais para {self._category_plural(qualified)} e ajudo negócios como o seu a:

✅ Reduzir dependência de apps de delivery
✅ Aumentar vendas diretas
✅ Automatizar atendimento via WhatsApp

Posso te mostrar como outros estabelecimentos aumentaram o faturamento em até 40% com essas estratégias.

{self.CTAS[Channel.CHAT]}"""

    def _call_script(self, qualified: QualifiedLead, pain_points: List[str]) -> str:
        lead = qualified.lead
        main_pain_point = pain_points[0] if pain_points else self.DEFAULT_PAIN_POINT

        if self._has_good_rating(qualified):
            rating_mention = f"vi que vocês possuem avaliação {format_rating(lead.rating)} estrelas no Google"
        else:
            rating_mention = "encontrei vocês no Google"

        return f"""**ABERTURA:**
"Bom dia/Boa tarde! Meu nome é [SEU NOME], da [SUA EMPRESA]. Estou ligando para {lead.name}. Poderia falar com o responsável?"

**PITCH:**
"Olha, {rating_mention} e percebi que vocês têm um ótimo negócio. O motivo da ligação é que trabalho com soluções digitais específicas para {self._category_plural(qualified)} e tenho ajudado estabelecimentos da região a aumentar suas vendas diretas, reduzindo a dependência de apps como iFood."

**QUALIFICAÇÃO:**
"Notei um ponto de atenção: {main_pain_point.lower()}. Vocês já pensaram em ter um sistema próprio de pedidos online? Ou em automatizar o atendimento via WhatsApp?"

**CTA:**
"Posso agendar uma demonstração rápida de 15 minutos para mostrar como funciona. {self.CTAS[Channel.CALL]}"

**OBJEÇÃO (se disser que não tem tempo):**
"Entendo perfeitamente. Por isso mesmo nossa solução é pensada para quem não tem tempo — ela automatiza o que hoje toma horas do seu dia. Que tal eu te enviar um vídeo de 3 minutos pelo WhatsApp? Qual o melhor número?\""""

    def _email_script(self, qualified: QualifiedLead, pain_points: List[str]) -> str:
        lead = qualified.lead
        main_pain_point = pain_points[0] if pain_points else self.DEFAULT_PAIN_POINT

        congratulations = (
            f"Parabéns pela avaliação {format_rating(lead.rating)} ⭐ no Google!\n\n"
            if self._has_good_rating(qualified) else ""
        )

        return f"""**Assunto:** {lead.name} — Oportunidade de aumentar vendas diretas

Olá, equipe {lead.name}!

{congratulations}Meu nome é [SEU NOME] e trabalho com transformação digital para {self._category_plural(qualified)}.

Analisando a presença online de {lead.name}, identifiquei um ponto de atenção ({main_pain_point.lower()}) e oportunidades claras para:

📈 **Aumentar vendas diretas** (sem taxas de apps)
⚡ **Automatizar atendimento** via WhatsApp
🎯 **Capturar mais clientes** da sua região

**Cases de sucesso:**
Ajudamos a [Exemplo 1] a reduzir custos com delivery em 35% e a [Exemplo 2] a aumentar pedidos diretos em 50%.

**Próximo passo:**
Gostaria de agendar 15 minutos para uma demonstração? Sem compromisso.

{self.CTAS[Channel.EMAIL]}: [SEU WHATSAPP]

Abraço,
[SEU NOME]
[SUA EMPRESA]"""

    # ── Public operations ──────────────────────────────

    def generate(self, qualified: QualifiedLead, channel: Channel) -> ProspectingScript:
        """Generate the script for one lead on one channel."""
        channel = Channel(channel)
        pain_points = self.identify_pain_points(qualified)

        return ProspectingScript(
            lead_id=qualified.lead.id,
            lead_name=qualified.lead.name,
            channel=channel,
            script=self._builders[channel](qualified, pain_points),
            pain_points=pain_points,
            value_proposition=self.value_proposition(qualified),
            cta=self.CTAS[channel],
            personalization_factors=self.personalization_factors(qualified),
        )

    def generate_bulk_scripts(self, leads: Sequence[QualifiedLead], channel: Channel) -> List[ProspectingScript]:
        return [self.generate(lead, channel) for lead in leads]

    def generate_top_leads_scripts(
        self,
        leads: Sequence[QualifiedLead],
        top_n: int = 10,
        channel: Channel = Channel.CHAT,
    ) -> List[ProspectingScript]:
        """Scripts for the ``top_n`` highest-scoring leads."""
        top_leads = sorted(leads, key=lambda q: q.score, reverse=True)[:top_n]
        logger.debug(f"Generating {len(top_leads)} {Channel(channel).value} scripts")
        return self.generate_bulk_scripts(top_leads, channel)

    @staticmethod
    def recommended_approach(qualified: QualifiedLead) -> RecommendedApproach:
        """Pick the first-contact channel from the contacts the lead exposes."""
        lead = qualified.lead

        if lead.has_whatsapp:
            return RecommendedApproach(
                primary_channel=Channel.CHAT,
                reasoning="Lead possui WhatsApp — canal com maior taxa de resposta (70%+)",
                alternative_channels=[Channel.CALL, Channel.EMAIL],
            )

        if lead.phone:
            return RecommendedApproach(
                primary_channel=Channel.CALL,
                reasoning="Lead possui telefone — abordagem direta e pessoal",
                alternative_channels=[Channel.EMAIL],
            )

        return RecommendedApproach(
            primary_channel=Channel.EMAIL,
            reasoning="Sem WhatsApp ou telefone — email como última opção",
            alternative_channels=[],
        )
