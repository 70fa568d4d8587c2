"""Default financial-literacy question catalog, grouped by level."""

QUESTION_CATALOG = {
    1: [
        {
            "question": "What does the 50/30/20 budgeting rule recommend?",
            "options": [
                "50% needs, 30% wants, 20% savings and debt repayment",
                "50% savings, 30% needs, 20% wants",
                "50% wants, 30% savings, 20% needs",
            ],
            "correct_answer": "50% needs, 30% wants, 20% savings and debt repayment",
            "explanation": "The 50/30/20 rule splits income into needs, wants and savings so every dollar has a job.",
            "category": "budgeting",
        },
        {
            "question": "What should usually be your first savings priority?",
            "options": [
                "An emergency fund",
                "A vacation fund",
                "Buying individual stocks",
            ],
            "correct_answer": "An emergency fund",
            "explanation": "An emergency fund of 3-6 months of expenses keeps surprises from turning into debt.",
            "category": "saving",
        },
        {
            "question": "What is a budget?",
            "options": [
                "A plan for how you will spend and save your income",
                "A list of things you want to buy",
                "A type of bank account",
            ],
            "correct_answer": "A plan for how you will spend and save your income",
            "explanation": "A budget assigns your expected income to spending and saving goals before the money is gone.",
            "category": "budgeting",
        },
        {
            "question": "Which of these is a need rather than a want?",
            "options": [
                "Rent",
                "A streaming subscription",
                "Dining out",
            ],
            "correct_answer": "Rent",
            "explanation": "Needs are expenses required to live and work; housing is the classic example.",
            "category": "budgeting",
        },
        {
            "question": "Where is the safest place to keep an emergency fund?",
            "options": [
                "A high-yield savings account",
                "A volatile stock portfolio",
                "Cash hidden at home",
            ],
            "correct_answer": "A high-yield savings account",
            "explanation": "Emergency money must be safe and quickly accessible while still earning some interest.",
            "category": "saving",
        },
        {
            "question": "What does 'paying yourself first' mean?",
            "options": [
                "Saving a portion of income before spending on anything else",
                "Buying something nice every payday",
                "Paying your own salary from a business",
            ],
            "correct_answer": "Saving a portion of income before spending on anything else",
            "explanation": "Automating savings right after payday makes saving a habit instead of an afterthought.",
            "category": "saving",
        },
    ],
    2: [
        {
            "question": "What is compound interest?",
            "options": [
                "Interest earned on both the principal and previously earned interest",
                "Interest paid only on the original deposit",
                "A fee charged for opening an account",
            ],
            "correct_answer": "Interest earned on both the principal and previously earned interest",
            "explanation": "Compound interest is 'interest on interest' and makes money grow faster over time.",
            "category": "investing",
        },
        {
            "question": "Which credit score range is generally considered excellent?",
            "options": [
                "750-850",
                "500-600",
                "300-450",
            ],
            "correct_answer": "750-850",
            "explanation": "Scores of 750-850 usually qualify for the best interest rates on loans and cards.",
            "category": "credit",
        },
        {
            "question": "What most improves a credit score over time?",
            "options": [
                "Paying bills on time",
                "Opening many new cards at once",
                "Maxing out your credit limit",
            ],
            "correct_answer": "Paying bills on time",
            "explanation": "Payment history is the largest factor in most credit scoring models.",
            "category": "credit",
        },
        {
            "question": "What is the debt avalanche method?",
            "options": [
                "Paying off the highest-interest debt first",
                "Paying off the smallest balance first",
                "Taking a new loan to pay old ones",
            ],
            "correct_answer": "Paying off the highest-interest debt first",
            "explanation": "Targeting the highest rate first minimizes the total interest you pay.",
            "category": "credit",
        },
        {
            "question": "What is credit utilization?",
            "options": [
                "The share of your available credit you are using",
                "The number of credit cards you own",
                "The interest rate on your card",
            ],
            "correct_answer": "The share of your available credit you are using",
            "explanation": "Keeping utilization low, ideally under 30%, signals responsible borrowing.",
            "category": "credit",
        },
        {
            "question": "Why start saving for retirement early?",
            "options": [
                "Compounding has more time to grow your money",
                "Retirement accounts close to older savers",
                "Early savings are not taxed ever",
            ],
            "correct_answer": "Compounding has more time to grow your money",
            "explanation": "Every extra year of growth multiplies the effect of compounding on your contributions.",
            "category": "retirement",
        },
    ],
    3: [
        {
            "question": "What does diversification mean in investing?",
            "options": [
                "Spreading investments across different assets to reduce risk",
                "Putting all money into the best-performing stock",
                "Only investing in your own country",
            ],
            "correct_answer": "Spreading investments across different assets to reduce risk",
            "explanation": "Diversification avoids putting all your eggs in one basket.",
            "category": "investing",
        },
        {
            "question": "What is an index fund?",
            "options": [
                "A fund that tracks a market index such as the S&P 500",
                "A savings account with a fixed rate",
                "A loan backed by real estate",
            ],
            "correct_answer": "A fund that tracks a market index such as the S&P 500",
            "explanation": "Index funds offer broad diversification at low cost by mirroring an index.",
            "category": "investing",
        },
        {
            "question": "What is an insurance deductible?",
            "options": [
                "The amount you pay before insurance starts paying",
                "The monthly insurance payment",
                "A discount for safe drivers",
            ],
            "correct_answer": "The amount you pay before insurance starts paying",
            "explanation": "A higher deductible usually lowers your premium but raises out-of-pocket costs.",
            "category": "insurance",
        },
        {
            "question": "What is an employer 401(k) match?",
            "options": [
                "Money your employer adds when you contribute to your retirement plan",
                "A tax penalty for early withdrawal",
                "A bonus paid in company stock only",
            ],
            "correct_answer": "Money your employer adds when you contribute to your retirement plan",
            "explanation": "Contributing enough to get the full match is effectively free money.",
            "category": "retirement",
        },
        {
            "question": "What generally happens to bond prices when interest rates rise?",
            "options": [
                "They fall",
                "They rise",
                "They stay exactly the same",
            ],
            "correct_answer": "They fall",
            "explanation": "Existing bonds pay less than new ones, so their market price drops.",
            "category": "investing",
        },
    ],
    4: [
        {
            "question": "What is an expense ratio?",
            "options": [
                "The annual fee a fund charges as a percentage of assets",
                "The ratio of income to expenses in a budget",
                "The cost of trading a single share",
            ],
            "correct_answer": "The annual fee a fund charges as a percentage of assets",
            "explanation": "Small differences in expense ratios compound into large differences over decades.",
            "category": "investing",
        },
        {
            "question": "What is dollar-cost averaging?",
            "options": [
                "Investing a fixed amount at regular intervals",
                "Buying only when prices fall",
                "Converting savings into foreign currency",
            ],
            "correct_answer": "Investing a fixed amount at regular intervals",
            "explanation": "Regular fixed investments buy more shares when prices are low and reduce timing risk.",
            "category": "investing",
        },
        {
            "question": "What is asset allocation?",
            "options": [
                "How your portfolio is divided among stocks, bonds and cash",
                "Choosing a bank for your checking account",
                "The order in which you pay debts",
            ],
            "correct_answer": "How your portfolio is divided among stocks, bonds and cash",
            "explanation": "Asset allocation drives most of a portfolio's risk and return.",
            "category": "investing",
        },
        {
            "question": "What is the main benefit of a Roth retirement account?",
            "options": [
                "Qualified withdrawals in retirement are tax-free",
                "Contributions are always tax-deductible",
                "There are no contribution limits",
            ],
            "correct_answer": "Qualified withdrawals in retirement are tax-free",
            "explanation": "Roth contributions are taxed now so that qualified growth and withdrawals are not taxed later.",
            "category": "retirement",
        },
        {
            "question": "What is net worth?",
            "options": [
                "Total assets minus total liabilities",
                "Your annual salary before taxes",
                "The balance of your checking account",
            ],
            "correct_answer": "Total assets minus total liabilities",
            "explanation": "Net worth is the clearest single snapshot of your financial position.",
            "category": "budgeting",
        },
    ],
}


def build_seed_rows(catalog=None):
    """Flatten a level-keyed catalog into QuizQuestion constructor kwargs."""
    from finquest_app.modules.gaming.config import difficulty_for_level

    catalog = QUESTION_CATALOG if catalog is None else catalog
    rows = []
    for level, questions in sorted(catalog.items()):
        for data in questions:
            rows.append({
                "level": int(level),
                "question_text": data["question"],
                "options": list(data["options"]),
                "correct_answer": data["correct_answer"],
                "explanation": data["explanation"],
                "category": data.get("category", "financial_literacy"),
                "difficulty": data.get("difficulty") or difficulty_for_level(int(level)),
                "is_active": data.get("is_active", True),
            })
    return rows
