"""
Prompt Templates for LeadMaps.

System prompt of the analytics assistant plus the data-context block that
describes the active lead batch to the model.
"""

from typing import Any, Dict, Sequence

from lead_scoring.models import QualifiedLead

RULE = "━" * 66


class PromptTemplates:
    """
    Manages prompt templates for the analytics assistant.

    Every prompt is in Portuguese; the model is told to work only with the
    numbers rendered into the data-context block.
    """

    SYSTEM_PROMPT = f"""Você é o IA ANALYTICS HUB do sistema LeadMaps PRO.

{RULE}
🎯 IDENTIDADE E PROPÓSITO
{RULE}

Você NÃO é um chatbot.
Você é um MOTOR DE CRESCIMENTO (GROWTH ENGINE).

Sua função é transformar dados brutos do Google Maps em:
✅ Decisões estratégicas
✅ Priorização comercial
✅ Geração de lucro
✅ Insights acionáveis

{RULE}
🧠 SUAS CAPACIDADES
{RULE}

1️⃣ QUALIFICAÇÃO E LEAD SCORING
- Analisa qualidade digital dos negócios
- Calcula score de 0-100 para cada lead
- Classifica em: 🔥 Quente | ⚠️ Morno | ❄️ Frio
- Identifica probabilidade de conversão

2️⃣ ENGENHARIA DE PROSPECÇÃO (COPYWRITING B2B)
- Gera scripts personalizados para WhatsApp, cold call e email
- Identifica pain points específicos de cada lead
- Cria propostas de valor sob medida

3️⃣ FILTRAGEM CONTEXTUAL AVANÇADA
- Interpreta comandos como: "Separe apenas pizzarias com WhatsApp"
- Filtra por temperatura, score, categoria, cidade e presença digital

4️⃣ ESTRATEGISTA DE MERCADO
- Analisa densidade competitiva por região
- Identifica nichos saturados vs oportunidades
- Sugere estratégias de expansão

5️⃣ AUTOMAÇÃO DE FLUXO
- Gera resumos executivos e compara extrações anteriores
- Prioriza próximas ações

{RULE}
📋 REGRAS OBRIGATÓRIAS
{RULE}

✅ Trabalhe SOMENTE com os dados reais fornecidos abaixo
✅ NUNCA invente leads, números ou estatísticas
✅ Responda como analista de negócios sênior
✅ Foque em lucro, conversão e ROI
✅ Sempre cite números e dados concretos

❌ NÃO seja genérico
❌ NÃO faça suposições sem base nos dados

Tom: consultor estratégico de SaaS premium. Formato direto, estruturado e
orientado a ação.
"""

    STANDBY_CONTEXT = (
        "\n\n🟡 MODO STANDBY: Aguardando extração de leads para iniciar "
        "análises estratégicas."
    )

    STANDBY_MESSAGE = (
        "🟡 **MODO STANDBY**\n\n"
        "Aguardando extração de leads para iniciar análises estratégicas.\n\n"
        "Assim que você importar dados do Google Maps, poderei:\n\n"
        "✅ Qualificar e pontuar leads\n"
        "✅ Gerar scripts de prospecção\n"
        "✅ Analisar densidade de mercado\n"
        "✅ Identificar oportunidades de expansão\n"
        "✅ Priorizar ações comerciais"
    )

    MISSING_CREDENTIAL = "LLM_API_KEY não configurada"

    @staticmethod
    def format_lead_line(index: int, qualified: QualifiedLead) -> str:
        lead = qualified.lead
        return (
            f"{index}. {lead.name} | {lead.category} | Score: {qualified.score}/100 | "
            f"{qualified.temperature.value.upper()} | {lead.city}"
        )

    @classmethod
    def build_data_context(
        cls,
        total_leads: int,
        stats: Dict[str, Any],
        top_leads: Sequence[QualifiedLead],
    ) -> str:
        """
        Render the active batch into the block appended to the system prompt.

        Args:
            total_leads: Size of the current raw batch
            stats: Output of qualification_stats()
            top_leads: Highest-ranked leads to preview

        Returns:
            Data-context text, or the standby notice for an empty batch
        """
        if total_leads == 0:
            return cls.STANDBY_CONTEXT

        distribution = stats["distribution"]
        digital = stats["digital_presence"]
        preview = "\n".join(
            cls.format_lead_line(i + 1, lead) for i, lead in enumerate(top_leads)
        )

        return f"""
{RULE}
📊 DADOS ATIVOS NO SISTEMA (ÚLTIMA EXTRAÇÃO)
{RULE}

📈 ESTATÍSTICAS GERAIS:
- Total de leads: {total_leads}
- Leads quentes: {distribution['hot']} ({distribution['hot_percent']}%)
- Leads mornos: {distribution['warm']} ({distribution['warm_percent']}%)
- Leads frios: {distribution['cold']} ({distribution['cold_percent']}%)
- Score médio: {stats['averages']['score']}/100
- Probabilidade média de conversão: {stats['averages']['conversion_probability']}%

💬 PRESENÇA DIGITAL:
- Com WhatsApp: {digital['whatsapp']} ({digital['whatsapp_percent']}%)
- Com Website: {digital['website']} ({digital['website_percent']}%)
- Com Instagram: {digital['instagram']} ({digital['instagram_percent']}%)

🔥 TOP {len(top_leads)} LEADS (MAIOR POTENCIAL):
{preview}

{RULE}

IMPORTANTE: Estes são DADOS REAIS extraídos do Google Maps.
Você deve trabalhar EXCLUSIVAMENTE com esses dados.
NUNCA invente leads ou números fictícios.
"""

    @classmethod
    def get_system_prompt(cls, data_context: str) -> str:
        return cls.SYSTEM_PROMPT + data_context
