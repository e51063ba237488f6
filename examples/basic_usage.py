"""Basic usage example for the service ranking engine."""

import asyncio

from service_ranking import IntentAnalysis, ServiceRecordModel, ServiceSearchService


# Rows as exported from the service catalogue, keyed by its column headers
CATALOGUE_ROWS = [
    {
        "事项编码": "430100001",
        "事项名称": "居民身份证遗失补领",
        "事项描述": "居民身份证遗失后申请补领新证",
        "服务对象": "自然人",
        "所属市州单位": "长沙市公安局",
        "发布渠道": "Android,iOS,Web",
        "是否高频事项": "是",
        "满意度": "98%",
    },
    {
        "事项编码": "430100002",
        "事项名称": "居民身份证地址变更",
        "服务对象": "自然人",
        "所属市州单位": "长沙市公安局",
        "发布渠道": "Android,iOS,Web",
    },
    {
        "事项编码": "430000003",
        "事项名称": "企业设立登记",
        "事项简称": "开办企业",
        "服务对象": "法人",
        "所属市州单位": "湖南省市场监督管理局",
        "发布渠道": "Web",
        "是否高频事项": "是",
    },
    {
        "事项编码": "430200004",
        "事项名称": "从业人员健康检查",
        "标签": "健康证 体检",
        "所属市州单位": "株洲市卫生健康委员会",
    },
    {
        "事项编码": "430000005",
        "事项名称": "社会保障卡挂失",
        "服务对象": "自然人",
        "所属市州单位": "湖南省人力资源和社会保障厅",
        "发布渠道": "Android,iOS",
        "是否高频事项": "是",
        "满意度": "96",
    },
    {
        "事项编码": "430000006",
        "事项名称": "退休审批",
        "服务对象": "自然人",
    },
]


class KeywordAnalyzer:
    """Toy query analyzer standing in for a language-model intent service."""

    async def analyze(self, query: str) -> IntentAnalysis:
        if "养老" in query:
            return IntentAnalysis(keywords=["退休审批"], role="自然人")
        return IntentAnalysis()


async def basic_search_demo():
    """Demonstrate basic search functionality."""
    print("Service Ranking - Basic Usage Demo")
    print("=" * 50)

    print("\n1. Loading catalogue...")
    records = [ServiceRecordModel.model_validate(row).to_record() for row in CATALOGUE_ROWS]
    print(f"   Parsed {len(records)} service records")

    print("\n2. Initializing search service...")
    async with ServiceSearchService.create(
        records=records,
        analyzer=KeywordAnalyzer(),
        log_level="INFO"
    ) as service:

        print("\n3. Performing searches...")

        search_examples = [
            ("身份证丢了", "Android", "any", "长沙"),
            ("我要办理健康证", "iOS", "any", "长沙"),
            ("开公司", "Android", "法人", "any"),
            ("开公司", "Web", "法人", "any"),
            ("养老", "Web", "any", "any"),
        ]

        for query_text, channel, role, locality in search_examples:
            print(f"\n   Query: '{query_text}' (channel={channel}, role={role}, locality={locality})")

            response = await service.search_text(
                query_text, channel=channel, role=role, locality=locality, limit=3
            )
            print(f"   Cleaned query: {response.cleaned_query}; locked entity: {response.locked_entity}")
            print(f"   Terms: {', '.join(t.term for t in response.terms)}")

            if response.results:
                for result in response.results:
                    print(f"     {result.rank}. {result.record.name} - Score: {result.score:.1f}")
                    for reason in result.reasons:
                        print(f"        {reason}")
            else:
                print("   No results found")

        print("\n4. Health check and statistics...")
        health = await service.health_check()
        print(f"   System status: {health['status']}")

        stats = await service.get_stats()
        print(f"   Total searches performed: {stats['engine']['total_searches']}")
        print(f"   Average search time: {stats['engine']['avg_search_time']:.3f}s")
        print(f"   Scorer failures: {stats['engine']['scorer_failures']}")

    print("\nDemo completed successfully!")


if __name__ == "__main__":
    asyncio.run(basic_search_demo())
